"""Tests for the JSON-RPC tool dispatcher."""

from __future__ import annotations

import json

import pytest

from testgen.service.protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    TOOLS,
    ToolServer,
)
from tests._fixtures.stubs import StubOrchestrator


@pytest.fixture
def orchestrator() -> StubOrchestrator:
    return StubOrchestrator()


@pytest.fixture
def server(orchestrator: StubOrchestrator) -> ToolServer:
    return ToolServer(lambda: orchestrator)


def _call(server: ToolServer, name: str, arguments: dict, request_id: int = 1) -> dict:
    response = server.handle_payload(
        {
            "jsonrpc": "2.0",
            "id": request_id,
            "method": "tools/call",
            "params": {"name": name, "arguments": arguments},
        }
    )
    assert response is not None
    return response


def test_tools_list_describes_three_tools(server: ToolServer) -> None:
    response = server.handle_payload({"jsonrpc": "2.0", "id": 7, "method": "tools/list"})

    assert response == {"jsonrpc": "2.0", "id": 7, "result": {"tools": TOOLS}}
    names = [tool["name"] for tool in TOOLS]
    assert names == ["analyze_component", "generate_tests", "read_component"]
    assert TOOLS[1]["inputSchema"]["required"] == ["filePath", "projectRoot"]
    assert "outputPath" in TOOLS[1]["inputSchema"]["properties"]


def test_initialize_reports_server_info(server: ToolServer) -> None:
    response = server.handle_payload({"jsonrpc": "2.0", "id": "init", "method": "initialize", "params": {}})

    assert response["id"] == "init"
    assert response["result"]["serverInfo"]["name"] == "testgen"
    assert response["result"]["capabilities"] == {"tools": {}}


def test_analyze_component_returns_model_json(server: ToolServer) -> None:
    response = _call(server, "analyze_component", {"filePath": "src/Button.tsx", "projectRoot": "/repo"})

    content = response["result"]["content"]
    assert content[0]["type"] == "text"
    payload = json.loads(content[0]["text"])
    assert payload["componentName"] == "Button"
    assert payload["props"] == [{"name": "label", "type": "string", "optional": False}]


def test_read_component_prefixes_path(server: ToolServer) -> None:
    response = _call(server, "read_component", {"filePath": "src/Button.tsx", "projectRoot": "/repo"})

    text = response["result"]["content"][0]["text"]
    assert text == "Content of src/Button.tsx:\n\nexport const Button = () => null;\n"


def test_generate_tests_forwards_output_path(server: ToolServer, orchestrator: StubOrchestrator) -> None:
    response = _call(
        server,
        "generate_tests",
        {"filePath": "src/Button.tsx", "projectRoot": "/repo", "outputPath": "tests/Button.test.tsx"},
    )

    text = response["result"]["content"][0]["text"]
    assert text.startswith("Test file generated at: /repo/tests/Button.test.tsx")
    assert "All tests passed on iteration 1." in text
    assert orchestrator.calls[-1] == (
        "generate_tests",
        "src/Button.tsx",
        "/repo",
        "tests/Button.test.tsx",
        True,
    )


def test_unknown_method_and_tool_are_not_found(server: ToolServer) -> None:
    unknown_method = server.handle_payload({"jsonrpc": "2.0", "id": 1, "method": "resources/list"})
    unknown_tool = _call(server, "delete_everything", {}, request_id=2)

    assert unknown_method["error"]["code"] == METHOD_NOT_FOUND
    assert unknown_tool["error"]["code"] == METHOD_NOT_FOUND
    assert "delete_everything" in unknown_tool["error"]["message"]


def test_invalid_arguments_are_rejected(server: ToolServer) -> None:
    response = _call(server, "analyze_component", {"filePath": "src/Button.tsx"})

    assert response["error"]["code"] == INVALID_PARAMS
    assert "projectRoot" in response["error"]["message"]


def test_missing_component_is_an_internal_error(server: ToolServer) -> None:
    response = _call(server, "read_component", {"filePath": "src/Nope.tsx", "projectRoot": "/repo"})

    assert response["error"]["code"] == INTERNAL_ERROR
    assert response["error"]["message"].startswith("Internal error: Component file not found")


def test_notifications_get_no_response(server: ToolServer) -> None:
    assert server.handle_payload({"jsonrpc": "2.0", "method": "notifications/initialized"}) is None


def test_malformed_lines_are_skipped(server: ToolServer) -> None:
    assert server.handle_line("{not json") is None
    assert server.handle_line(json.dumps(["not", "an", "object"])) is None


def test_server_keeps_serving_after_errors(server: ToolServer) -> None:
    _call(server, "read_component", {"filePath": "src/Nope.tsx", "projectRoot": "/repo"}, request_id=1)

    response = _call(server, "read_component", {"filePath": "src/Button.tsx", "projectRoot": "/repo"}, request_id=2)

    assert response["id"] == 2
    assert "result" in response


def test_deeply_nested_line_is_skipped(server: ToolServer) -> None:
    assert server.handle_line("[" * 100000) is None


@pytest.mark.parametrize("request_id", [[1], {"n": 1}, 1.5])
def test_invalid_request_ids_are_not_echoed(server: ToolServer, request_id: object) -> None:
    response = server.handle_payload({"jsonrpc": "2.0", "id": request_id, "method": "tools/list"})

    assert response == {
        "jsonrpc": "2.0",
        "id": None,
        "error": {"code": INVALID_REQUEST, "message": "Invalid request"},
    }


def test_invalid_request_keeps_a_usable_id(server: ToolServer) -> None:
    response = server.handle_payload({"jsonrpc": "2.0", "id": 9, "method": 42})

    assert response is not None
    assert response["id"] == 9
    assert response["error"]["code"] == INVALID_REQUEST
