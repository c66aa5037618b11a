"""Exceptions raised by the orchestrator client and the chat flow."""


def connection_hint(url: str) -> str:
    """Connectivity hint shown in the transcript when a request to ``url`` fails."""
    return f"Connection Error: Failed to reach {url}. Ensure the orchestrator backend is running."


class StudioError(Exception):
    """Base class for studio chat errors."""


class EmptyPromptError(StudioError):
    """Raised when a submitted message is empty or whitespace-only."""

    def __init__(self) -> None:
        super().__init__("Message is empty")


class StreamBusyError(StudioError):
    """Raised when a request starts while another one is still in flight."""

    def __init__(self) -> None:
        super().__init__("A response is already in progress")


class OrchestratorError(StudioError):
    """Raised when a request to the orchestrator fails.

    Attributes:
        url: The configured orchestrator endpoint.
    """

    def __init__(self, message: str, url: str) -> None:
        super().__init__(message)
        self.url = url

    @property
    def user_message(self) -> str:
        return connection_hint(self.url)


class OrchestratorStatusError(OrchestratorError):
    """Raised when the orchestrator answers with a non-success status."""

    def __init__(self, status_code: int, url: str) -> None:
        super().__init__(f"Backend responded with status: {status_code}", url)
        self.status_code = status_code


class UnreadableBodyError(OrchestratorError):
    """Raised when the response body is missing, unreadable or malformed."""


class OrchestratorConnectionError(OrchestratorError):
    """Raised when the transport fails before or during a response."""
