"""
Exceptions raised by the jeeves client.

Every error is reported the same way by ``jeeves.app.main``: the message is
printed and the process exits with status 1.
"""


class JeevesError(Exception):
    """Base exception for all jeeves errors."""

    exit_code = 1


class UsageError(JeevesError):
    """No prompt was given on the command line."""


class ConfigurationError(JeevesError):
    """A required environment variable is missing or malformed."""


class SerializationError(JeevesError):
    """The request payload could not be encoded."""


class RequestBuildError(JeevesError):
    """The HTTP request could not be prepared."""


class TransportError(JeevesError):
    """The request could not be sent or no response was received."""


class BodyReadError(JeevesError):
    """The response body could not be read."""


class DecodeError(JeevesError):
    """The response body is not a valid chat completion."""


class APIError(JeevesError):
    """The API answered with a non-200 status."""

    def __init__(self, status_code, message):
        super().__init__(f"OpenAI API returned HTTP {status_code}: {message}")
        self.status_code = status_code
        self.api_message = message


class EmptyResponseError(JeevesError):
    """The completion contained no choices."""
