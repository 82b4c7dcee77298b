from logging import getLogger
from typing import TypeVar, Any, Generic, TYPE_CHECKING

from xresource.common.types import HttpMethod, Headers
from xresource.remote.errors import RequestError
from xresource.remote.model import RemoteModel
from xresource.remote.transport import Transport, TransportResponse, get_default_transport

if TYPE_CHECKING:
    # Prevents circular imports, only needed for IDE type completion.
    from xresource.remote.api import RemoteApi

log = getLogger(__name__)

M = TypeVar('M', bound=RemoteModel)
""" Generic TypeVar/placeholder for `xresource.remote.model.RemoteModel`. """


class RemoteClient(Generic[M]):
    """ Sends requests for a model class through its `xresource.remote.transport.Transport`,
        and records failures on the model's `xresource.remote.response_state.ResponseState`.

        Only one client is allocated per model class, see `RemoteClient.api`.
        Subclass it and declare the type-hint on your `xresource.remote.api.RemoteApi` subclass
        to customize it:

        >>> class MyClient(RemoteClient[M]):
        ...     def parse_send_response_error(self, obj, error):
        ...         ...
        >>>
        >>> class MyApi(RemoteApi[M]):
        ...     client: MyClient[M]
    """

    # noinspection PyMissingConstructor
    def __init__(self, api: "RemoteApi[M]"):
        """
        Args:
            api: The `xresource.remote.api.RemoteApi` object that is creating this object.
        """
        super().__init__()
        self._api = api

    @property
    def api(self) -> "RemoteApi[M]":
        """
        The class-based RemoteApi, the same one you would get via
        `xresource.remote.model.RemoteModel.api`.

        The model instances all get a separate `xresource.remote.api.RemoteApi`, but they all
        share this client via `xresource.remote.api.RemoteApi.client`.
        """
        return self._api

    @property
    def transport(self) -> Transport:
        """ `xresource.remote.options.ApiOptions.transport` if set, otherwise the default
            from `xresource.remote.transport.get_default_transport`.
        """
        return self.api.options.transport or get_default_transport()

    async def send_request(
            self,
            method: HttpMethod,
            url: str,
            *,
            body: Any = None,
            headers: Headers = None
    ) -> TransportResponse:
        log.info(
            f"Sending ({method.value} {url}) for model ({self.api.model_type.__name__})."
        )
        return await self.transport.request(method, url, body=body, headers=headers)

    def parse_send_response_error(self, obj: M, error: RequestError):
        """
        Records `error` on the `xresource.remote.api.RemoteApi.response_state` of `obj`.

        If the error body is a mapping with an `errors` key, it's parsed as:

        - A mapping of field name to a message (or list of messages/error dicts); these become
          field errors via `xresource.remote.response_state.ResponseState.add_field_error`,
          with the message as the `code` when the API does not give one.
        - Anything else is kept as-is in `xresource.remote.response_state.ResponseState.errors`.
        """
        state = obj.api.response_state
        body = error.body

        errors = None
        field_errors = None
        if isinstance(body, dict):
            raw_errors = body.get('errors')
            if isinstance(raw_errors, dict):
                field_errors = raw_errors
            elif raw_errors is not None:
                errors = raw_errors if isinstance(raw_errors, list) else [raw_errors]
        elif body is not None:
            errors = [body]

        state.mark_for_error(error.status, errors)

        for field, messages in (field_errors or {}).items():
            if not isinstance(messages, list):
                messages = [messages]
            for message in messages:
                if isinstance(message, dict):
                    code = message.get('code', message.get('message'))
                    state.add_field_error(field, code, message)
                else:
                    state.add_field_error(field, message, {'message': message})

        log.warning(
            f"Request ({error.method} {error.url}) for ({obj}) failed with status "
            f"({error.status}); errors: ({state.errors}), field errors: ({state.field_errors})."
        )
