"""JSON-RPC dispatcher exposing testgen operations as tools."""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..logging import get_logger
from ..orchestrator import Orchestrator

JSONRPC_VERSION = "2.0"
PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "testgen"
SERVER_VERSION = "1.0.0"

INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

_PATH_PROPERTIES: Dict[str, Any] = {
    "filePath": {
        "type": "string",
        "description": "Path to the component file (e.g., src/components/common/button/index.tsx)",
    },
    "projectRoot": {
        "type": "string",
        "description": "Root directory of the project",
    },
}

TOOLS: List[Dict[str, Any]] = [
    {
        "name": "analyze_component",
        "description": "Analyze a React component file to extract its structure and props",
        "inputSchema": {
            "type": "object",
            "properties": dict(_PATH_PROPERTIES),
            "required": ["filePath", "projectRoot"],
        },
    },
    {
        "name": "generate_tests",
        "description": "Generate test cases for a React component and repair them until they pass",
        "inputSchema": {
            "type": "object",
            "properties": {
                **_PATH_PROPERTIES,
                "outputPath": {
                    "type": "string",
                    "description": "Optional custom output path for the test file",
                },
            },
            "required": ["filePath", "projectRoot"],
        },
    },
    {
        "name": "read_component",
        "description": "Read and display the content of a component file",
        "inputSchema": {
            "type": "object",
            "properties": dict(_PATH_PROPERTIES),
            "required": ["filePath", "projectRoot"],
        },
    },
]


class RpcRequest(BaseModel):
    jsonrpc: str = JSONRPC_VERSION
    id: Optional[Union[int, str]] = None
    method: str
    params: Dict[str, Any] = Field(default_factory=dict)


class RpcError(BaseModel):
    code: int
    message: str


class RpcResponse(BaseModel):
    jsonrpc: str = JSONRPC_VERSION
    id: Optional[Union[int, str]] = None
    result: Optional[Dict[str, Any]] = None
    error: Optional[RpcError] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            payload["error"] = self.error.model_dump()
        else:
            payload["result"] = self.result if self.result is not None else {}
        return payload


class ToolCall(BaseModel):
    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)


class ComponentArguments(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_path: str = Field(alias="filePath")
    project_root: str = Field(alias="projectRoot")


class GenerateArguments(ComponentArguments):
    output_path: Optional[str] = Field(default=None, alias="outputPath")


class ToolNotFoundError(LookupError):
    """Raised for ``tools/call`` requests naming an unknown tool."""


def _text_result(text: str) -> Dict[str, Any]:
    return {"content": [{"type": "text", "text": text}]}


class ToolServer:
    """Routes JSON-RPC requests to orchestrator operations.

    Requests are handled one at a time, in arrival order; every failure inside
    a request becomes an error response so the caller can keep serving.
    """

    def __init__(self, orchestrator_factory: Callable[[], Orchestrator] = Orchestrator) -> None:
        self._orchestrator_factory = orchestrator_factory
        self.logger = get_logger("server")
        self._methods: Dict[str, Callable[[RpcRequest], Dict[str, Any]]] = {
            "initialize": self._initialize,
            "ping": lambda _request: {},
            "tools/list": lambda _request: {"tools": TOOLS},
            "tools/call": self._call_tool,
        }
        self._tools: Dict[str, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
            "analyze_component": self._analyze_component,
            "generate_tests": self._generate_tests,
            "read_component": self._read_component,
        }

    def handle_line(self, line: str) -> Optional[Dict[str, Any]]:
        """Handle one protocol line; returns ``None`` when nothing should be written."""
        try:
            payload = json.loads(line)
        except (ValueError, RecursionError) as exc:
            self.logger.warning("Error parsing request: %s", exc)
            return None
        return self.handle_payload(payload)

    def handle_payload(self, payload: Any) -> Optional[Dict[str, Any]]:
        try:
            request = RpcRequest.model_validate(payload)
        except ValidationError as exc:
            self.logger.warning("Skipping malformed request: %s", exc.errors()[0]["msg"])
            if isinstance(payload, dict) and payload.get("id") is not None:
                return _error(_echo_id(payload["id"]), INVALID_REQUEST, "Invalid request").to_payload()
            return None
        if request.id is None:
            self.logger.debug("Received notification %s", request.method)
            return None
        return self.handle(request).to_payload()

    def handle(self, request: RpcRequest) -> RpcResponse:
        method = self._methods.get(request.method)
        if method is None:
            return _error(request.id, METHOD_NOT_FOUND, f"Method not found: {request.method}")
        try:
            return RpcResponse(id=request.id, result=method(request))
        except ToolNotFoundError as exc:
            return _error(request.id, METHOD_NOT_FOUND, str(exc))
        except ValidationError as exc:
            return _error(request.id, INVALID_PARAMS, f"Invalid params: {_describe(exc)}")
        except Exception as exc:
            self.logger.exception("Request %s failed", request.id)
            return _error(request.id, INTERNAL_ERROR, f"Internal error: {exc}")

    # ------------------------------------------------------------------
    # Methods

    @staticmethod
    def _initialize(request: RpcRequest) -> Dict[str, Any]:
        return {
            "protocolVersion": request.params.get("protocolVersion", PROTOCOL_VERSION),
            "capabilities": {"tools": {}},
            "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
        }

    def _call_tool(self, request: RpcRequest) -> Dict[str, Any]:
        call = ToolCall.model_validate(request.params)
        tool = self._tools.get(call.name)
        if tool is None:
            raise ToolNotFoundError(f"Unknown tool: {call.name}")
        self.logger.info("Calling tool %s", call.name)
        return tool(call.arguments)

    # ------------------------------------------------------------------
    # Tools

    def _analyze_component(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        args = ComponentArguments.model_validate(arguments)
        model = self._orchestrator_factory().analyze(args.file_path, args.project_root)
        return _text_result(json.dumps(model.to_dict(), indent=2))

    def _generate_tests(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        args = GenerateArguments.model_validate(arguments)
        outcome = self._orchestrator_factory().generate_tests(
            args.file_path, args.project_root, args.output_path
        )
        return _text_result(outcome.report())

    def _read_component(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        args = ComponentArguments.model_validate(arguments)
        content = self._orchestrator_factory().read_component(args.file_path, args.project_root)
        return _text_result(f"Content of {args.file_path}:\n\n{content}")


def _error(request_id: Optional[Union[int, str]], code: int, message: str) -> RpcResponse:
    return RpcResponse(id=request_id, error=RpcError(code=code, message=message))


def _echo_id(value: Any) -> Optional[Union[int, str]]:
    if isinstance(value, (int, str)) and not isinstance(value, bool):
        return value
    return None


def _describe(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts)


__all__ = [
    "INTERNAL_ERROR",
    "INVALID_PARAMS",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "RpcRequest",
    "RpcResponse",
    "TOOLS",
    "ToolServer",
]
