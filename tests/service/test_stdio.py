"""Tests for the stdio transport."""

from __future__ import annotations

import io
import json

from testgen.service.protocol import ToolServer
from testgen.service.stdio import serve_stdio
from tests._fixtures.stubs import StubOrchestrator


def test_serve_stdio_answers_requests_in_order() -> None:
    orchestrator = StubOrchestrator()
    requests = "\n".join(
        [
            json.dumps({"jsonrpc": "2.0", "id": 1, "method": "initialize", "params": {}}),
            json.dumps({"jsonrpc": "2.0", "method": "notifications/initialized"}),
            "this is not json",
            "",
            json.dumps({"jsonrpc": "2.0", "id": 2, "method": "tools/list"}),
        ]
    )
    stdout = io.StringIO()

    serve_stdio(ToolServer(lambda: orchestrator), stdin=io.StringIO(requests + "\n"), stdout=stdout)

    lines = stdout.getvalue().splitlines()
    assert [json.loads(line)["id"] for line in lines] == [1, 2]


def _list_request(request_id: int) -> str:
    return json.dumps({"jsonrpc": "2.0", "id": request_id, "method": "tools/list"})


def test_serve_stdio_skips_undecodable_and_deeply_nested_lines() -> None:
    data = b"\xff\xfe garbage\n" + ("[" * 100000).encode() + b"\n" + _list_request(7).encode() + b"\n"
    stdin = io.TextIOWrapper(io.BytesIO(data), encoding="utf-8")
    stdout = io.StringIO()

    serve_stdio(ToolServer(StubOrchestrator), stdin=stdin, stdout=stdout)

    lines = stdout.getvalue().splitlines()
    assert len(lines) == 1
    assert json.loads(lines[0])["id"] == 7


def test_serve_stdio_keeps_serving_after_a_bad_request_id() -> None:
    bad = json.dumps({"jsonrpc": "2.0", "id": [1], "method": "tools/list"})
    stdout = io.StringIO()

    serve_stdio(
        ToolServer(StubOrchestrator),
        stdin=io.StringIO(f"{bad}\n{_list_request(2)}\n"),
        stdout=stdout,
    )

    first, second = (json.loads(line) for line in stdout.getvalue().splitlines())
    assert first["id"] is None
    assert first["error"]["code"] == -32600
    assert second["id"] == 2


class _FlakyServer(ToolServer):
    def handle_line(self, line: str):
        if "boom" in line:
            raise RuntimeError("boom")
        return super().handle_line(line)


def test_serve_stdio_logs_and_skips_lines_that_raise() -> None:
    stdout = io.StringIO()

    serve_stdio(
        _FlakyServer(StubOrchestrator),
        stdin=io.StringIO(f"boom\n{_list_request(3)}\n"),
        stdout=stdout,
    )

    assert [json.loads(line)["id"] for line in stdout.getvalue().splitlines()] == [3]
