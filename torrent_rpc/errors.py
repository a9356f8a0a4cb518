"""
Technical errors raised by the RPC call engine.

Only these abort a call. A response whose ``result`` is anything other than
``"success"`` is not an error: it is returned to the caller as a normal
RpcResponse so the caller can read what the daemon reported.

- TransportError: network/IO failure, never retried
- DecodeError: body is not JSON or does not match the expected shape
- MalformedIdentifierError: an identifier is neither a number nor a string
- NoSessionIdReceived: a 409 response without the session id header
- MaxRetriesReached: too many consecutive 409 responses
"""


class TransError(Exception):
    """Base exception for all RPC client errors."""
    pass


class TransportError(TransError):
    """Raised when the HTTP request itself fails (connection, timeout, ...)."""
    pass


class DecodeError(TransError):
    """Raised when a response body cannot be decoded into the expected type."""
    pass


class MalformedIdentifierError(DecodeError):
    """Raised when a torrent identifier is neither an integer nor a string."""
    pass


class NoSessionIdReceived(TransError):
    """Raised when the server answers 409 but does not supply a session id."""
    pass


class MaxRetriesReached(TransError):
    """Raised when the session handshake keeps failing after every retry."""

    def __init__(self, attempts: int):
        super().__init__(f"Max retries reached after {attempts} attempts")
        self.attempts = attempts
