"""
The transport is what actually sends a request over the wire for a
`xresource.remote.client.RemoteClient`.

`Transport` is the abstract interface; `HttpxTransport` implements it with an
`httpx.AsyncClient`. Tests (and anything else that wants to intercept requests) can set
their own with `DefaultTransport` (or `set_default_transport`), or per-model via
`xresource.remote.options.ApiOptions.transport`.
"""
import dataclasses
import os
from abc import ABC, abstractmethod
from collections.abc import Mapping
from logging import getLogger
from typing import Any, Dict, Optional

import httpx
from xinject import Dependency

from xresource.common.types import HttpMethod, Headers
from xresource.remote.errors import RequestError, XRemoteMaintenanceError
from xresource.remote.forms import FormData

log = getLogger(__name__)

BASE_URL_ENV_VAR = 'XRESOURCE_BASE_URL'
""" Environment variable `HttpxTransport` uses as its `base_url` when none is passed in. """


@dataclasses.dataclass(frozen=True)
class TransportResponse:
    status: int
    body: Any = None
    """ Decoded body: parsed JSON, text, or `None` for an empty body. """
    headers: Mapping = dataclasses.field(default_factory=dict)


class Transport(ABC):
    @abstractmethod
    async def request(
            self,
            method: HttpMethod,
            url: str,
            *,
            body: Any = None,
            headers: Headers = None
    ) -> TransportResponse:
        """
        Sends exactly one request and returns the decoded response.

        Raises:
            xresource.remote.errors.RequestError: For a non-2xx response, or if no response
                could be received (in which case `RequestError.status` is `None`).
        """


class HttpxTransport(Transport):
    """
    Sends requests via an `httpx.AsyncClient`.

    >>> async with HttpxTransport('https://api.example.com') as transport:
    ...     with DefaultTransport(transport):
    ...         photo = await Photo.api.find(1)

    If no `client` is passed in we create one, and close it in `HttpxTransport.aclose`.
    A client passed in is owned by the caller, and left open.
    """

    def __init__(
            self,
            base_url: str = None,
            *,
            client: httpx.AsyncClient = None,
            timeout: float = 30.0,
            headers: Headers = None
    ):
        if base_url is None:
            base_url = os.environ.get(BASE_URL_ENV_VAR, '')

        self.base_url = base_url
        self._owns_client = client is None
        if client is None:
            client = httpx.AsyncClient(base_url=base_url, timeout=timeout, headers=headers)
        self.client = client

    async def aclose(self):
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def request(
            self,
            method: HttpMethod,
            url: str,
            *,
            body: Any = None,
            headers: Headers = None
    ) -> TransportResponse:
        method = HttpMethod.parse(method)
        headers = dict(headers or {})
        kwargs = self.encode_body(body, headers)

        try:
            response = await self.client.request(method.value, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            raise RequestError(
                f"Request ({method.value} {url}) failed before a response was received; "
                f"error: ({e}).",
                status=None,
                method=method.value,
                url=url,
            ) from e

        decoded = self.decode_body(response)
        if response.is_success:
            return TransportResponse(
                status=response.status_code, body=decoded, headers=dict(response.headers)
            )

        error_type = RequestError
        if response.status_code == 503:
            error_type = XRemoteMaintenanceError

        raise error_type(
            status=response.status_code, body=decoded, method=method.value, url=url
        )

    def encode_body(self, body: Any, headers: Dict[str, str]) -> Dict[str, Any]:
        """ Returns the keyword arguments for `httpx.AsyncClient.request` that carry `body`.
            May drop the `Content-Type` from `headers` when httpx needs to generate it.
        """
        if body is None:
            return {}

        content_type_key = next((k for k in headers if k.lower() == 'content-type'), None)
        content_type = headers.get(content_type_key, '') if content_type_key else ''

        if isinstance(body, FormData) or (
            isinstance(body, Mapping) and content_type.startswith('multipart/')
        ):
            if not isinstance(body, FormData):
                body = FormData.from_mapping(body)

            # httpx has to generate the content-type itself, so it includes the boundary.
            if content_type_key:
                del headers[content_type_key]

            log.debug(
                f"Encoding multipart body with fields ({list(body.fields)}) "
                f"and files ({list(body.files)})."
            )
            kwargs = {'data': body.fields}
            if body.files:
                kwargs['files'] = body.files
            return kwargs

        if content_type.startswith('application/x-www-form-urlencoded'):
            log.debug("Encoding body as url-encoded form data.")
            return {'data': body}

        if isinstance(body, (bytes, str)):
            return {'content': body}

        return {'json': body}

    def decode_body(self, response: httpx.Response) -> Any:
        if not response.content:
            return None

        content_type = response.headers.get('content-type', '')
        if 'json' in content_type:
            return response.json()

        return response.text


class DefaultTransport(Dependency):
    """
    Holds the transport used by models that don't set
    `xresource.remote.options.ApiOptions.transport`.

    It's a `xinject.Dependency`, so the current one is found with `DefaultTransport.grab()`
    and a different one can be used for a block of code (or a test) by activating it:

    >>> with DefaultTransport(HttpxTransport('https://staging.example.com')):
    ...     photo = await Photo.api.find(1)

    With no transport given, a `HttpxTransport` is created the first time one is needed.
    That one is owned by us; `DefaultTransport.aclose` closes it.
    """

    def __init__(self, transport: Transport = None):
        self._transport = transport
        self._created: Optional[HttpxTransport] = None

    @property
    def transport(self) -> Transport:
        if self._transport is not None:
            return self._transport

        if self._created is None:
            log.debug("No default transport set, creating a HttpxTransport.")
            self._created = HttpxTransport()
        return self._created

    @transport.setter
    def transport(self, value: Optional[Transport]):
        self._transport = value

    async def aclose(self):
        """ Closes the `HttpxTransport` we created (if any); one that was set is left alone. """
        created = self._created
        if created is None:
            return

        self._created = None
        await created.aclose()


def get_default_transport() -> Transport:
    """ Transport of the current `DefaultTransport`. """
    return DefaultTransport.grab().transport


def set_default_transport(transport: Optional[Transport]) -> Optional[Transport]:
    """ Sets the transport of the current `DefaultTransport`, returning the one that was set
        before (which can be `None`). Passing in `None` goes back to a lazily created
        `HttpxTransport`.
    """
    default = DefaultTransport.grab()
    previous = default._transport
    default.transport = transport
    return previous
