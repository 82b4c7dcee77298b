from typing import Any, Optional

from xresource.errors import XResourceError


class XRemoteError(XResourceError):
    pass


class RequestError(XRemoteError):
    """
    Raised when a request could not be completed; either the service responded with a non-2xx
    status code, or the transport failed before any response was received
    (in that case `RequestError.status` is `None`).
    """

    status: Optional[int] = None
    """ HTTP status code of the response, `None` if no response was received. """

    body: Any = None
    """ Raw (decoded) error body the service responded with, if any. """

    method: Optional[str] = None
    url: Optional[str] = None

    def __init__(
            self,
            message: str = None,
            *,
            status: int = None,
            body: Any = None,
            method: str = None,
            url: str = None
    ):
        if message is None:
            message = f"Request ({method} {url}) failed with status ({status}); body: ({body})."
        super().__init__(message)
        self.status = status
        self.body = body
        self.method = method
        self.url = url


class XRemoteMaintenanceError(RequestError):
    """
    Standard exception that should be raised if during an API communication it's determined
    there is an error due to a maintenance window of some sort (ie: a 503 response).
    """


class TransformError(XRemoteError):
    """ Raised when a request or response transform callback raised an exception.
        The original exception is chained via `__cause__`.
    """

    direction: str = None
    """ Either `"request"` or `"response"`. """

    def __init__(self, message: str, *, direction: str):
        super().__init__(message)
        self.direction = direction
