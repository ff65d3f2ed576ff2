"""Numeric process exit codes used by the ``httphook`` command line.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~httphook.exceptions.HttpHookError` subclass.
Shell wrappers can inspect the exit code to learn the failure class
without parsing stderr.

Example::

    $ httphook get http://localhost:9/health
    $ echo $?
    4   # EXIT_TRANSPORT_ERROR -- connection refused
"""

EXIT_SUCCESS = 0
"""The request completed with HTTP 200."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_REQUEST_BUILD_ERROR = 2
"""The request could not be built (bad URL, bad method, unencodable body)."""

EXIT_HOOK_ABORT = 3
"""A before or after hook aborted the call."""

EXIT_TRANSPORT_ERROR = 4
"""A network-level error occurred (timeout, DNS failure, connection refused, cancellation)."""

EXIT_STATUS_ERROR = 5
"""The remote server answered with a status other than 200."""

EXIT_BODY_READ_ERROR = 6
"""The response body could not be read."""

EXIT_HOOK_LOAD_ERROR = 7
"""A hook registered through entry points failed to load."""
