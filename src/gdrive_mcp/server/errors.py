"""Errors raised while handling tool calls and resource reads.

ToolError subclasses carry a message that is shown to the caller as-is.
Anything else raised by the remote client is a remote-call fault and is
described with describe_error().
"""

import httpx


class ToolError(Exception):
    """Base class for errors detected by the server itself."""


class PreconditionError(ToolError):
    """Required identifying information is missing or malformed."""


class NotFoundError(ToolError):
    """A lookup by title or name matched nothing."""


class UnknownToolError(ToolError):
    """The requested tool name is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


def describe_error(exc: BaseException) -> str:
    """Return a short description of a remote-call fault.

    Google API errors carry a JSON body with error.message; prefer that
    over the generic httpx status text.
    """
    if isinstance(exc, httpx.HTTPStatusError):
        try:
            payload = exc.response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict):
            error = payload.get("error")
            if isinstance(error, dict) and error.get("message"):
                return f"{error['message']} (HTTP {exc.response.status_code})"
        return f"HTTP {exc.response.status_code} from {exc.request.url}"
    return str(exc) or type(exc).__name__
