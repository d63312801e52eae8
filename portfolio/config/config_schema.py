"""Pydantic models for configuration validation."""

from typing import Optional
from pydantic import BaseModel, Field, field_validator


class NotionConfig(BaseModel):
    """Notion source database configuration."""

    api_key: Optional[str] = Field(default=None, description="Notion integration token")
    database_id: Optional[str] = Field(default=None, description="ID of the projects database")
    api_version: str = Field(default="2022-06-28", description="Notion-Version header value")
    page_size: int = Field(default=100, ge=1, le=100, description="Results per paginated request")
    rate_limit_delay: float = Field(
        default=0.0, ge=0.0, description="Delay between API calls (seconds)"
    )


class ExportConfig(BaseModel):
    """Artifact export configuration."""

    output_path: str = Field(default="public/projects.json", description="Artifact path")
    table_style: str = Field(default="html", description="Table rendering: 'ascii' or 'html'")
    max_indent_depth: int = Field(default=6, ge=0, description="Maximum indentation levels")
    max_column_width: int = Field(default=56, ge=3, description="ASCII table column cap")
    numbered_lists: str = Field(
        default="literal", description="Numbered list markers: 'literal' or 'ordinal'"
    )
    untitled_label: str = Field(default="(Untitled)", description="Placeholder title")
    unknown_status_label: str = Field(default="Unknown", description="Placeholder status")

    @field_validator("table_style")
    @classmethod
    def validate_table_style(cls, v: str) -> str:
        """Accept only the supported table renderers."""
        v = v.lower()
        if v not in ("ascii", "html"):
            raise ValueError(f"Invalid table_style: '{v}'. Must be 'ascii' or 'html'")
        return v

    @field_validator("numbered_lists")
    @classmethod
    def validate_numbered_lists(cls, v: str) -> str:
        v = v.lower()
        if v not in ("literal", "ordinal"):
            raise ValueError(f"Invalid numbered_lists: '{v}'. Must be 'literal' or 'ordinal'")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Optional[str] = Field(default=None, description="Optional log file path")


class WebConfig(BaseModel):
    """Preview server configuration."""

    host: str = Field(default="127.0.0.1", description="Bind address")
    port: int = Field(default=8765, gt=0, lt=65536, description="Bind port")


class AppConfig(BaseModel):
    """Main application configuration."""

    notion: NotionConfig = Field(default_factory=NotionConfig, description="Notion configuration")
    export: ExportConfig = Field(default_factory=ExportConfig, description="Export configuration")
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging configuration")
    web: WebConfig = Field(default_factory=WebConfig, description="Preview server configuration")

    def validate(self) -> None:
        """Validate configuration consistency."""
        if not self.notion.api_key or not self.notion.database_id:
            raise ConfigError("Missing NOTION_TOKEN or NOTION_DATABASE_ID")


class ConfigError(ValueError):
    """Raised when required configuration is absent or inconsistent."""
