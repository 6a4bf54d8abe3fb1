"""Exceptions raised by DOM handles and the command session."""


class DomActorError(Exception):
    """Base exception for all domactor errors."""
    pass


class ProtocolError(DomActorError):
    """Exception raised when the browser answers a command with an error."""

    def __init__(self, message: str, method: str | None = None):
        super().__init__(message)
        self.message = message
        self.method = method

    def __str__(self) -> str:
        if self.method:
            return f"{self.method}: {self.message}"
        return self.message


class StaleHandleError(DomActorError):
    """Exception raised when a node handle is used after the document was replaced."""

    def __init__(self, node_id: int):
        self.node_id = node_id
        super().__init__(f"Node {node_id} is stale: the document was replaced after it was obtained")


class PositionUnavailableError(DomActorError):
    """Exception raised when a node has no content geometry to interact with."""

    def __init__(self, node_id: int):
        self.node_id = node_id
        super().__init__(f"Failed to click node {node_id} without position")


class ClosedPageError(DomActorError):
    """Exception raised when an operation is attempted on a closed page."""

    def __init__(self, message: str = "The page is closed"):
        super().__init__(message)
        self.message = message


class TransportTimeoutError(DomActorError):
    """Exception raised when no response arrives within the bounded wait."""

    def __init__(
        self,
        method: str,
        timeout_seconds: float | None = None,
    ):
        self.method = method
        self.timeout_seconds = timeout_seconds
        super().__init__(f"No response to {method} within {timeout_seconds}s")
