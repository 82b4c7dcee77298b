from typing import Mapping, Optional, TYPE_CHECKING

from xresource.common.types import HttpMethod, TransformCallback
from xresource.common.utils import SetUnsetValues, identity

if TYPE_CHECKING:
    from xresource.remote.transport import Transport


class ApiOptions(SetUnsetValues):
    """
    Per-model-class request options. Pass one in as the `api_options` class argument:

    >>> class Comment(RemoteModel, base_url='/comments', api_options=ApiOptions(
    ...     update_method=HttpMethod.PATCH
    ... )):
    ...     body: str

    Only options passed into the init method (or set directly on the object) count as set.
    Anything not set is inherited from the parent model's options, and otherwise falls back to
    the class-level defaults below.

    You can also change them later via `xresource.remote.api.RemoteApi.options`,
    ie: `Comment.api.options.headers = {...}`.
    """

    update_method: HttpMethod = HttpMethod.PUT
    """ Method `xresource.remote.api.RemoteApi.save` (and `update`) uses for a model that
        already has an `id`; `PUT` or `PATCH`.
    """

    headers: Mapping[str, str] = {
        'Accept': 'application/json',
        'Content-Type': 'application/json',
    }
    """ Default headers for every request, any headers passed into a request are merged on top.
    """

    transform_request: TransformCallback = staticmethod(identity)
    """ Called with the outgoing payload, returns the payload to actually send. """

    transform_response: TransformCallback = staticmethod(identity)
    """ Called with the (decoded) response body, returns what should be merged into the model.
    """

    transport: Optional["Transport"] = None
    """ Transport to send requests with; if `None` we use
        `xresource.remote.transport.get_default_transport`.
    """

    def __init__(
            self,
            *,
            update_method: HttpMethod = None,
            headers: Mapping[str, str] = None,
            transform_request: TransformCallback = None,
            transform_response: TransformCallback = None,
            transport: "Transport" = None,
    ):
        if update_method is not None:
            self.update_method = HttpMethod.parse(update_method)
        # Always a copy, options objects never share a headers dict.
        self._headers_given = headers is not None
        self.headers = dict(headers if headers is not None else type(self).headers)
        if transform_request is not None:
            self.transform_request = transform_request
        if transform_response is not None:
            self.transform_response = transform_response
        if transport is not None:
            self.transport = transport

    def set_unset_values(self, parent: Optional["ApiOptions"]):
        super().set_unset_values(parent)
        if parent is not None and not self._headers_given:
            self.headers = dict(parent.headers)

    def __repr__(self):
        return (
            'ApiOptions('
            f'update_method={self.update_method.value!r}, headers={dict(self.headers)!r}, '
            f'transport={self.transport!r}'
            ')'
        )
