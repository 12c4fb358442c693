"""sitecheck exceptions."""


class SiteCheckError(Exception):
    """Base exception for all sitecheck errors."""


class ConfigurationError(SiteCheckError):
    """Invalid or unreadable configuration."""


class ToolError(SiteCheckError):
    """Base exception for external tool errors."""

    def __init__(
        self,
        message: str,
        tool: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.tool = tool
        self.cause = cause
        super().__init__(message)


class ToolUnavailableError(ToolError):
    """Raised when a required tool or local service is not available."""


class ToolExecutionError(ToolError):
    """Raised when an external tool ran but did not succeed."""

    def __init__(
        self,
        message: str,
        tool: str | None = None,
        returncode: int | None = None,
        stderr: str | None = None,
    ) -> None:
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message, tool=tool)


class ConnectivityError(SiteCheckError):
    """Network, DNS or TLS failure while checking a target."""

    def __init__(
        self,
        message: str = "Connection failed",
        endpoint: str | None = None,
        hints: list[str] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.hints = hints or []
        self.cause = cause
        super().__init__(message)


class ReportWriteError(SiteCheckError):
    """Raised when a report cannot be written to disk."""

    def __init__(self, message: str, path: str | None = None) -> None:
        self.path = path
        super().__init__(message)
