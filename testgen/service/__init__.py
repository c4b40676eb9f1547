"""Tool server transports: stdio JSON-RPC and the optional HTTP app."""

from .app import create_app, run_service
from .protocol import ToolServer
from .stdio import serve_stdio

__all__ = ["ToolServer", "create_app", "run_service", "serve_stdio"]
