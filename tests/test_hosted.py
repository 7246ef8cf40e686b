"""Tests for the hosted execution API client."""

from __future__ import annotations

import json

import httpx
import pytest

from coderunner.errors import HostedExecutionError
from coderunner.hosted import HostedExecutionClient, build_payload, format_hosted_output


def _client(handler):
    return HostedExecutionClient(
        "https://runner.example/api/v2/piston/",
        client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


def test_build_payload():
    payload = build_payload("cpp", "int main(){}", "input")
    assert payload["language"] == "c++"
    assert payload["version"] == "*"
    assert payload["files"] == [{"name": "main.cpp", "content": "int main(){}"}]
    assert payload["stdin"] == "input"
    assert payload["args"] == []
    assert payload["compile_timeout"] == 10000
    assert payload["run_timeout"] == 3000
    assert payload["compile_memory_limit"] == -1
    assert payload["run_memory_limit"] == -1


def test_build_payload_java_file_name():
    assert build_payload("java", "")["files"][0]["name"] == "Main.java"


def test_build_payload_unknown_language():
    with pytest.raises(ValueError):
        build_payload("cobol", "")


def test_format_output_success():
    result = {"run": {"stdout": "hi\n", "stderr": "", "code": 0, "signal": None}}
    assert format_hosted_output(result) == "hi\n"


def test_format_output_compile_error_first():
    result = {
        "compile": {"stderr": "main.cpp:1: error"},
        "run": {"stdout": "", "stderr": "", "code": 1, "signal": None},
    }
    assert format_hosted_output(result) == "Compilation Error:\nmain.cpp:1: error\n"


def test_format_output_signal_annotation():
    result = {"run": {"stdout": "partial", "stderr": "Killed", "code": 137, "signal": "SIGKILL"}}
    assert format_hosted_output(result) == "partialKilled\nProcess exited with code 137"


def test_format_output_nonzero_without_signal_is_not_annotated():
    result = {"run": {"stdout": "", "stderr": "Traceback", "code": 1, "signal": None}}
    assert format_hosted_output(result) == "Traceback"


def test_format_output_empty():
    assert format_hosted_output({}) == "No output"


def test_execute_posts_payload():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"run": {"stdout": "Hello, Rupesh!\n", "stderr": "", "code": 0}})

    with _client(handler) as client:
        output = client.execute("python", "print(input())", "Rupesh")
    assert output == "Hello, Rupesh!\n"
    assert seen["url"] == "https://runner.example/api/v2/piston/execute"
    assert seen["body"]["language"] == "python"
    assert seen["body"]["stdin"] == "Rupesh"


def test_execute_http_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"message": "busy"})

    with _client(handler) as client:
        with pytest.raises(HostedExecutionError, match="status: 503"):
            client.execute("python", "print(1)")


def test_execute_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with _client(handler) as client:
        with pytest.raises(HostedExecutionError, match="connection refused"):
            client.execute("python", "print(1)")
