"""Unit tests for sitecheck.core.exceptions module."""

import pytest

from sitecheck.core.exceptions import (
    ConfigurationError,
    ConnectivityError,
    ReportWriteError,
    SiteCheckError,
    ToolError,
    ToolExecutionError,
    ToolUnavailableError,
)


class TestHierarchy:
    """Every error derives from SiteCheckError."""

    @pytest.mark.parametrize(
        "error_class",
        [
            ConfigurationError,
            ConnectivityError,
            ReportWriteError,
            ToolError,
            ToolExecutionError,
            ToolUnavailableError,
        ],
    )
    def test_subclass_of_base(self, error_class: type[Exception]) -> None:
        assert issubclass(error_class, SiteCheckError)

    def test_tool_errors(self) -> None:
        assert issubclass(ToolUnavailableError, ToolError)
        assert issubclass(ToolExecutionError, ToolError)


class TestToolErrors:
    def test_tool_error_attributes(self) -> None:
        cause = FileNotFoundError("npx")
        error = ToolUnavailableError("npx missing", tool="npx", cause=cause)
        assert str(error) == "npx missing"
        assert error.tool == "npx"
        assert error.cause is cause

    def test_execution_error_attributes(self) -> None:
        error = ToolExecutionError(
            "lighthouse exited with code 1: boom",
            tool="lighthouse",
            returncode=1,
            stderr="boom",
        )
        assert error.tool == "lighthouse"
        assert error.returncode == 1
        assert error.stderr == "boom"
        assert error.cause is None


class TestConnectivityError:
    def test_defaults(self) -> None:
        error = ConnectivityError()
        assert str(error) == "Connection failed"
        assert error.endpoint is None
        assert error.hints == []

    def test_hints(self) -> None:
        error = ConnectivityError(
            "Request timeout", endpoint="www.example.com", hints=["Check DNS"]
        )
        assert error.endpoint == "www.example.com"
        assert error.hints == ["Check DNS"]


class TestOtherErrors:
    def test_report_write_error_path(self) -> None:
        error = ReportWriteError("cannot write", path="/readonly")
        assert error.path == "/readonly"
        assert str(error) == "cannot write"
