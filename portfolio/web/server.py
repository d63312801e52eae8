"""FastAPI preview server for the exported projects artifact."""

import argparse
import asyncio
import html
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.responses import FileResponse, HTMLResponse

from ..config.config_loader import load_config
from ..render.content import render_content_html
from ..render.grid import render_project_grid
from ..utils.logging import setup_logging

logger = logging.getLogger(__name__)

PAGE_TEMPLATE = """<!doctype html>
<html>
<head><meta charset="utf-8"><title>{title}</title></head>
<body>
{body}
</body>
</html>
"""


class PreviewServer:
    """Serves a generated artifact with the grid and detail renderings."""

    def __init__(
        self,
        artifact_path: str,
        host: str = "127.0.0.1",
        port: int = 8765,
    ):
        self.artifact_path = Path(artifact_path)
        self.host = host
        self.port = port
        self.app = FastAPI(title="Portfolio Preview")
        self._server: Optional[uvicorn.Server] = None

        self._setup_routes()

    def load_artifact(self) -> Dict[str, Any]:
        """
        Read the artifact from disk on every request so re-exports show up.

        Raises:
            HTTPException: 404 if the artifact has not been generated yet
        """
        if not self.artifact_path.is_file():
            raise HTTPException(status_code=404, detail="Artifact not found; run portfolio-export first")
        with open(self.artifact_path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _projects(self) -> List[Dict[str, Any]]:
        return self.load_artifact().get("projects") or []

    def _find_project(self, project_id: str) -> Dict[str, Any]:
        for project in self._projects():
            if project.get("id") == project_id:
                return project
        raise HTTPException(status_code=404, detail=f"Project '{project_id}' not found")

    def _setup_routes(self):
        """Configure FastAPI routes."""

        @self.app.get("/", response_class=HTMLResponse)
        async def index():
            """Serve the project grid."""
            return PAGE_TEMPLATE.format(title="Projects", body=render_project_grid(self._projects()))

        @self.app.get("/projects.json")
        async def artifact():
            """Serve the raw artifact as the UI would fetch it."""
            if not self.artifact_path.is_file():
                raise HTTPException(status_code=404, detail="Artifact not found")
            return FileResponse(self.artifact_path, media_type="application/json")

        @self.app.get("/api/projects")
        async def list_projects():
            """Project summaries without their content."""
            return [
                {key: value for key, value in project.items() if key != "content"}
                for project in self._projects()
            ]

        @self.app.get("/api/projects/{project_id}")
        async def get_project(project_id: str):
            """One project with its content rendered as HTML."""
            project = dict(self._find_project(project_id))
            project["contentHtml"] = render_content_html(project.get("content") or [])
            return project

        @self.app.get("/projects/{project_id}", response_class=HTMLResponse)
        async def project_page(project_id: str):
            """Standalone detail page for one project."""
            project = self._find_project(project_id)
            title = html.escape(project.get("title") or "")
            body = f"<h2>{title}</h2>\n" + render_content_html(project.get("content") or [])
            return PAGE_TEMPLATE.format(title=title, body=body)

    async def start(self) -> None:
        """Start the web server."""
        config = uvicorn.Config(
            self.app,
            host=self.host,
            port=self.port,
            log_level="warning",
            access_log=False,
        )
        self._server = uvicorn.Server(config)
        logger.info(f"Preview server at {self.get_url()} serving {self.artifact_path}")
        await self._server.serve()

    async def stop(self) -> None:
        """Stop the web server."""
        if self._server:
            self._server.should_exit = True

    def get_url(self) -> str:
        """Get the URL for the preview."""
        return f"http://{self.host}:{self.port}"


def main(argv: Optional[List[str]] = None):
    """Entry point for ``portfolio-preview``."""
    parser = argparse.ArgumentParser(description="Preview an exported projects artifact", prog="portfolio-preview")
    parser.add_argument("-c", "--config", default=None, help="Path to configuration file")
    parser.add_argument("-a", "--artifact", default=None, help="Artifact path (default: from config)")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase verbosity")
    args = parser.parse_args(argv)

    setup_logging(verbosity=max(args.verbose, 1))
    try:
        config = load_config(args.config, require_credentials=False)
    except FileNotFoundError:
        print(f"Error: Configuration file not found: {args.config}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        sys.exit(1)

    server = PreviewServer(
        artifact_path=args.artifact or config.export.output_path,
        host=config.web.host,
        port=config.web.port,
    )
    print(f"Serving {server.artifact_path} at {server.get_url()}")
    asyncio.run(server.start())


if __name__ == "__main__":
    main()
