"""Local preview server for the exported portfolio artifact."""

from .server import PreviewServer

__all__ = ["PreviewServer"]
