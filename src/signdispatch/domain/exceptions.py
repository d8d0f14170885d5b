"""Domain exceptions for the signing workflow dispatcher."""

from typing import Optional


class DispatcherError(Exception):
    """
    Base exception for all dispatcher errors.

    ``phase`` names the step that failed (e.g. ``"dispatch workflow"``)
    and is prepended to the message once attached with :meth:`in_phase`.
    """

    phase: Optional[str] = None

    def in_phase(self, phase: str) -> "DispatcherError":
        """Attach the run phase that produced this error and return self."""
        self.phase = phase
        return self

    def __str__(self) -> str:
        message = super().__str__()
        if self.phase:
            return f"Failed to {self.phase}: {message}"
        return message


class ConfigurationError(DispatcherError):
    """Raised when a required input is missing or configuration is invalid."""
    pass


class RefResolutionError(DispatcherError):
    """Raised when the source ref name cannot be determined."""
    pass


class RemoteCallError(DispatcherError):
    """
    Raised when the remote service rejects a call.

    Covers non-success HTTP statuses and success responses carrying the
    service's ``{"message": ...}`` error envelope.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        reason: Optional[str] = None,
        body: Optional[str] = None
    ):
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason
        self.body = body


class TransientError(DispatcherError):
    """Raised when a single call times out or the connection drops."""
    pass


class ProtocolError(DispatcherError):
    """Raised when a success response does not match the expected shape."""
    pass


class PollTimeoutError(DispatcherError, TimeoutError):
    """Raised when the workflow does not complete before the poll deadline."""
    pass
