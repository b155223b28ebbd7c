"""
MCP server controlling Brave via AppleScript (macOS) or the DevTools protocol.

This module provides the main entry point and protocol handling.
Tool dispatch is handled via registry pattern in server/registry.py.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any

from .config import BraveConfig
from .controller import BraveController
from .errors import BackendError
from .server.contract import initialize_result, select_protocol, tools_list
from .server.registry import create_default_registry
from .server.types import ToolArgumentError, ToolResult

logger = logging.getLogger("mcp.brave")

MAX_LOGGED_CODE = 200


def _write_message(payload: dict[str, Any]) -> None:
    """Write JSON-RPC message to stdout."""
    data = json.dumps(payload, ensure_ascii=False)
    sys.stdout.buffer.write((data + "\n").encode())
    sys.stdout.buffer.flush()


def _read_message() -> dict[str, Any] | None:
    """Read JSON-RPC message from stdin. Returns None at EOF, {} for blank lines."""
    line = sys.stdin.buffer.readline()
    if not line:
        return None
    line = line.strip()
    if not line:
        return {}
    msg = json.loads(line.decode())
    if os.environ.get("MCP_TRACE"):
        logger.info("recv %s", msg)
    return msg


def redact_tool_arguments(arguments: dict[str, Any]) -> dict[str, Any]:
    """Drop URL query strings and truncate script bodies before logging."""
    safe = dict(arguments)
    url = safe.get("url")
    if isinstance(url, str):
        safe["url"] = url.split("?")[0]
    code = safe.get("code")
    if isinstance(code, str) and len(code) > MAX_LOGGED_CODE:
        safe["code"] = code[:MAX_LOGGED_CODE] + "..."
    return safe


class McpServer:
    """MCP Server with registry-based tool dispatch."""

    def __init__(self, controller: BraveController | None = None, config: BraveConfig | None = None) -> None:
        self.config = config or BraveConfig.from_env()
        self.controller = controller or BraveController.from_config(self.config)
        self.registry = create_default_registry()

    def handle_initialize(self, request_id: Any, params: dict[str, Any] | None = None) -> None:
        """Handle initialize request."""
        requested = (params or {}).get("protocolVersion") if isinstance(params, dict) else None
        _write_message({"jsonrpc": "2.0", "id": request_id, "result": initialize_result(select_protocol(requested))})

    def handle_list_tools(self, request_id: Any) -> None:
        """Handle tools/list request."""
        _write_message({"jsonrpc": "2.0", "id": request_id, "result": {"tools": tools_list()}})

    def call_tool(self, name: str, arguments: dict[str, Any]) -> ToolResult:
        """Run one tool call and turn every failure into an error result."""
        logger.info("tool=%s args=%s", name, redact_tool_arguments(arguments))
        try:
            if not name:
                return ToolResult.error("Missing tool name")
            if not self.registry.has(name):
                return ToolResult.error(f"Unknown tool: {name}")
            return self.registry.dispatch(name, self.controller, arguments)
        except ToolArgumentError as e:
            logger.info("argument_error tool=%s %s", name, e)
            return ToolResult.error(str(e))
        except BackendError as e:
            logger.info("backend_error tool=%s type=%s raw=%s", name, type(e).__name__, e.raw)
            return ToolResult.error(e.message)
        except Exception as exc:
            logger.exception("tool_call_failed")
            return ToolResult.error(str(exc))

    def handle_call_tool(self, request_id: Any, name: str, arguments: dict[str, Any]) -> None:
        """Handle tools/call request."""
        result = self.call_tool(name, arguments)
        _write_message(
            {
                "jsonrpc": "2.0",
                "id": request_id,
                "result": {"content": result.to_content_list(), "isError": result.is_error},
            }
        )

    def dispatch(self, message: dict[str, Any]) -> None:
        """Dispatch incoming JSON-RPC message to appropriate handler."""
        if not message:
            return

        method = message.get("method")
        request_id = message.get("id")
        params = message.get("params") or {}

        if method == "initialize":
            self.handle_initialize(request_id, params)
        elif method == "notifications/initialized":
            return
        elif method in ("tools/list", "list_tools"):
            self.handle_list_tools(request_id)
        elif method in ("tools/call", "call_tool"):
            name = params.get("name")
            arguments = params.get("arguments") or {}
            if not isinstance(arguments, dict):
                arguments = {}
            self.handle_call_tool(request_id, name or "", arguments)
        elif method == "ping":
            _write_message({"jsonrpc": "2.0", "id": request_id, "result": {}})
        else:
            _write_message(
                {
                    "jsonrpc": "2.0",
                    "id": request_id,
                    "error": {"code": -32601, "message": f"Method {method} not found"},
                }
            )


def main() -> None:
    """Main entry point for MCP server."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )
    server = McpServer()
    logger.info("Brave control MCP server running on stdio")
    while True:
        message = _read_message()
        if message is None:
            break
        server.dispatch(message)


if __name__ == "__main__":
    main()
