"""Exception hierarchy for httphook.

All exceptions inherit from :class:`HttpHookError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`httphook.exit_codes`.
The dispatch path never raises these: they are returned as the ``error``
member of a :class:`~httphook.client.response.CallResult`. The command line
entry point maps them to process exit codes.

Subclass hierarchy::

    HttpHookError (exit 1)
    +-- RequestBuildError       (exit 2)
    |   +-- UrlParseError       (exit 2)
    |   +-- BodyEncodeError     (exit 2)
    +-- HookAbortError          (exit 3)
    +-- TransportError          (exit 4)
    |   +-- TimeoutError_       (exit 4)
    |   +-- CallCancelledError  (exit 4)
    |   +-- DeadlineExceededError (exit 4)
    +-- NonSuccessStatusError   (exit 5)
    +-- BodyReadError           (exit 6)
    +-- HookLoadError           (exit 7)
    +-- ConfigError             (exit 1)
"""

from httphook.exit_codes import (
    EXIT_BODY_READ_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_HOOK_ABORT,
    EXIT_HOOK_LOAD_ERROR,
    EXIT_REQUEST_BUILD_ERROR,
    EXIT_STATUS_ERROR,
    EXIT_TRANSPORT_ERROR,
)


class HttpHookError(Exception):
    """Base exception for all httphook errors.

    Every subclass sets a class-level ``exit_code`` corresponding to one of
    the constants in :mod:`httphook.exit_codes`.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class RequestBuildError(HttpHookError):
    """Raised when a request cannot be constructed from the caller's inputs."""

    exit_code = EXIT_REQUEST_BUILD_ERROR


class UrlParseError(RequestBuildError):
    """Raised when a URL string is not a syntactically valid URL reference."""


class BodyEncodeError(RequestBuildError):
    """Raised when a request body cannot be encoded as JSON and strict encoding is on."""


class HookAbortError(HttpHookError):
    """Conventional exception for a hook that wants to abort the call.

    Hooks may raise any exception; this one simply carries the right exit code
    when the call is made from the command line.
    """

    exit_code = EXIT_HOOK_ABORT


class TransportError(HttpHookError):
    """Raised on network-level failures (connection refused, DNS, protocol errors)."""

    exit_code = EXIT_TRANSPORT_ERROR


class TimeoutError_(TransportError):
    """Raised when the transport times out.

    Named with a trailing underscore to avoid shadowing the built-in
    ``TimeoutError``.
    """


class CallCancelledError(TransportError):
    """Raised when the call context was cancelled before the transport call."""


class DeadlineExceededError(TransportError):
    """Raised when the call context deadline passed before the transport call."""


class NonSuccessStatusError(HttpHookError):
    """Raised when the server answers with any status other than 200.

    Args:
        status_code: The HTTP status code received.
        body_text: The decoded response body, kept for diagnostics.
    """

    exit_code = EXIT_STATUS_ERROR

    def __init__(self, status_code: int, body_text: str):
        super().__init__(
            f"remote error, url: code {status_code}, response body: {body_text}"
        )
        self.status_code = status_code
        self.body_text = body_text


class BodyReadError(HttpHookError):
    """Raised when a 200 response body could not be read."""

    exit_code = EXIT_BODY_READ_ERROR


class HookLoadError(HttpHookError):
    """Raised when a hook fails to load or is registered twice."""

    exit_code = EXIT_HOOK_LOAD_ERROR


class ConfigError(HttpHookError):
    """Raised for configuration problems (invalid JSON, bad environment values)."""

    exit_code = EXIT_GENERIC_FAILURE
