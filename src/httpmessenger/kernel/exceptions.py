"""Exception hierarchy for httpmessenger.

All package exceptions inherit from HttpMessengerException, so callers can
catch one base type or a specific subclass.

Non-2xx HTTP statuses are NOT exceptions: they are reported through
``HttpMessenger.success``. Exceptions are reserved for faults that leave the
call without a usable outcome, such as a body that cannot be encoded or a
successful response whose body cannot be decoded into the requested type.
"""

from __future__ import annotations

# =============================================================================
# Base Exception
# =============================================================================


class HttpMessengerException(Exception):
    """Base exception for all httpmessenger errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "DESERIALIZATION_ERROR").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Infrastructure Exceptions
# =============================================================================


class InfrastructureException(HttpMessengerException):
    """Failures in the plumbing around a call: encoding, decoding, configuration."""


class SerializationException(InfrastructureException):
    """A request body could not be encoded as JSON."""


class DeserializationException(InfrastructureException):
    """A successful response body could not be decoded into the requested type."""


class ConfigurationException(InfrastructureException):
    """Configuration could not be resolved or bound."""
