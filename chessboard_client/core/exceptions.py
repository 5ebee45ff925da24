"""Custom exceptions. Everything raised on purpose by the client derives from ChessClientError."""


class ChessClientError(Exception):
    """Top-level exception of the chessboard client."""


class NetworkFailureError(ChessClientError):
    """The request to the engine never completed (connection refused, timeout, ...)."""


class EngineRejectedError(NetworkFailureError):
    """The engine answered, but with an error status code."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(ChessClientError):
    """The response body could not be interpreted as the expected shape."""


class InvalidTransitionError(ChessClientError):
    """The session controller was asked to perform a transition its current state does not allow."""
