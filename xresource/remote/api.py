from collections.abc import Mapping
from logging import getLogger
from typing import TypeVar, get_type_hints, List, Optional, Any, Tuple

from xresource.base.api import BaseApi
from xresource.base.fields import Field
from xresource.common.types import HttpMethod, Headers, JsonDict, Query, TransformCallback
from xresource.errors import XResourceError, InvalidStateError
from xresource.remote.client import RemoteClient
from xresource.remote.errors import RequestError, TransformError, XRemoteError
from xresource.remote.model import RemoteModel
from xresource.remote.options import ApiOptions
from xresource.remote.response_state import ResponseState
from xresource.remote.structure import RemoteStructure
from xresource.remote.urls import join_member_url, join_collection_url

log = getLogger(__name__)
M = TypeVar("M", bound=RemoteModel)


class RemoteApi(BaseApi[M]):
    """
    Api for models that live on a remote REST service.

    Every request goes through `RemoteApi.submit`; the verbs (`RemoteApi.save`,
    `RemoteApi.fetch`, `RemoteApi.delete`, etc.) only pick the method and url for it:

    >>> photo = Photo({'title': 'Sunset'})
    >>> await photo.api.save()        # POST /photos, merges response (ie: the new `id`).
    >>> photo.title = 'Sunrise'
    >>> await photo.api.save()        # PUT /photos/{id}
    >>> await photo.api.delete()      # DELETE /photos/{id}

    Class-level lookups go through the class api:

    >>> photo = await Photo.api.find(3)
    >>> photos = await Photo.api.get({'album': 'beach'})
    """

    # The type-hints inform this class what type of objects to create
    # when `client` and `structure` are needed/asked-for.
    #
    # You can override the type by making your own type-hint on a sub-class.
    client: RemoteClient[M]
    structure: RemoteStructure[Field]

    # This type-hint is only for IDE, `RemoteApi` does not use it.
    model: M

    @property
    def _client(self):
        """ Returns the `xresource.remote.client.RemoteClient` shared by everything of this
            model class, allocated via the type-hint for "client" on our class:

            >>> class MyClient(RemoteClient[M]):
            ...     pass
            >>>
            >>> class MyApi(RemoteApi[M]):
            ...     client: MyClient[M]  # <-- Type hint on 'client' property.
        """
        client = self.structure.internal_shared_api_values.get('client')
        if client:
            return client

        client_type = get_type_hints(type(self)).get('client', None)
        if client_type is None:
            raise XResourceError(
                f"RemoteClient subclass type is undefined for model class ({self.model_type}), "
                f"a type-hint for 'client' on BaseApi class must be in place for me to know what "
                f"type to get."
            )

        client = client_type(api=self.model_type.api)
        self.structure.internal_shared_api_values['client'] = client
        return client

    # PyCharm ignores the type-hint in subclasses when a property implements it;
    # see `BaseApi.structure` for the same workaround.
    client = _client

    _client = None

    params: Optional[Query] = None
    """ Query params of the associated model; sent with the collection url, and by
        `RemoteApi.fetch`. Set via the `params` init argument of
        `xresource.remote.model.RemoteModel`.
    """

    _base_url: Optional[str] = None

    @property
    def base_url(self) -> str:
        """ Collection path for requests; the `url` init argument of the model if one was given,
            otherwise `xresource.remote.structure.RemoteStructure.base_url`.
        """
        return self._base_url or self.structure.base_url

    @base_url.setter
    def base_url(self, value: Optional[str]):
        self._base_url = value

    @property
    def options(self) -> ApiOptions:
        """ The `xresource.remote.options.ApiOptions` for the model class. """
        return self.structure.api_options

    @property
    def response_state(self) -> ResponseState:
        """ REQUIRES associated model object.

        What happened during the last request sent for the model; ie: if it had an error,
        the response code, and any field errors the service told us about.
        """
        if self._model is None:
            raise XResourceError(
                f"Only the api of a model object has a response_state, not ({self})."
            )

        response_state = self._response_state
        if response_state is None:
            response_state = ResponseState()
            self._response_state = response_state
        return response_state

    _response_state: ResponseState = None

    # ------------------------------
    # --------- Urls ---------------

    def member_url(self, *segments: str) -> str:
        """ REQUIRES associated model object.

        Url of the model itself (ie: `/photos/42`), with any extra `segments` appended
        (ie: `member_url('upload')` -> `/photos/42/upload`).

        Raises `xresource.errors.InvalidStateError` if the model has no `id`.
        """
        return join_member_url(self.base_url, self.model.id, *segments)

    def collection_url(self, params: Query = None) -> str:
        """ Url of the collection with `params` (default: `RemoteApi.params`) as the query. """
        if params is None:
            params = self.params
        return join_collection_url(self.base_url, params)

    # ----------------------------------------------------
    # --------- Things REQUIRING an Associated Model -----

    def json(self) -> JsonDict:
        """
        See `xresource.base.api.BaseApi.json`; a `None` `id` is never sent, since it means
        the object has not been created on the service yet.
        """
        json = super().json()
        if json.get('id', False) is None:
            del json['id']
        return json

    def list_of_attrs_to_repr(self) -> List[str]:
        names = super().list_of_attrs_to_repr()
        if self.model.id is not None and 'id' not in names:
            names.insert(0, 'id')
        return names

    async def submit(
            self,
            method: HttpMethod,
            url: str = None,
            payload: Any = None,
            headers: Headers = None,
            *,
            transform_response: TransformCallback = None,
            transform_request: TransformCallback = None,
    ) -> M:
        """ REQUIRES associated model object.

        Sends one request for the model, and merges the response body into it.

        Args:
            method: A `xresource.common.types.HttpMethod` or its name (ie: `'post'`).
            url: Target of the request; defaults to `RemoteApi.member_url` if the model has
                an `id`, otherwise `RemoteApi.collection_url`.
            payload: Body of the request; if `None` and method is POST/PUT/PATCH, we send
                `RemoteApi.json`.
            headers: Merged on top of `xresource.remote.options.ApiOptions.headers`.
            transform_response: Called with the response body, what it returns is merged.
                Defaults to `xresource.remote.options.ApiOptions.transform_response`.
            transform_request: Called with the payload, what it returns is sent.
                Defaults to `xresource.remote.options.ApiOptions.transform_request`.

        Returns:
            The model, with the response merged into it.

        Raises:
            xresource.errors.ValidationError: If `method` is not a known HTTP method.
            xresource.remote.errors.RequestError: If the request failed; it's recorded on
                `RemoteApi.response_state`, and the model is left unchanged.
            xresource.remote.errors.TransformError: If a transform raised an exception.
            xresource.remote.errors.XRemoteError: If the response body is not a mapping
                (or empty).
        """
        method = HttpMethod.parse(method)
        model = self.model

        if url is None:
            url = self.member_url() if model.id is not None else self.collection_url()

        if payload is None and method.has_body:
            payload = self.json()

        status, body = await self._request(
            method,
            url,
            payload,
            headers,
            transform_request=transform_request,
            transform_response=transform_response,
            obj=model,
        )

        state = self.response_state
        if body is not None:
            try:
                if not isinstance(body, Mapping):
                    raise XRemoteError(
                        f"Response to ({method.value} {url}) for ({model}) can't be merged into "
                        f"the model, expected a mapping/dict but got ({type(body).__name__}) "
                        f"value ({body!r})."
                    )
                self.update_from_json(body)
            except XResourceError as e:
                state.mark_for_error(status, [str(e)])
                raise

        state.mark_for_no_errors(status)
        return model

    async def save(self, **kwargs) -> M:
        """ REQUIRES associated model object.

        POST the model to the collection url if it has no `id`, otherwise send it to the
        member url with `xresource.remote.options.ApiOptions.update_method`.

        Keyword arguments (`url`, `headers`, `transform_response`, `transform_request`)
        are passed along to `RemoteApi.submit`.
        """
        if self.model.id is None:
            return await self.create(**kwargs)
        return await self.update(**kwargs)

    async def create(self, *, url: str = None, **kwargs) -> M:
        """ REQUIRES associated model object. POST the model to the collection url. """
        if url is None:
            url = self.collection_url()
        return await self.submit(HttpMethod.POST, url, **kwargs)

    async def update(self, *, url: str = None, **kwargs) -> M:
        """ REQUIRES associated model object.

        Sends the model to its member url with `xresource.remote.options.ApiOptions.update_method`.
        """
        self._require_id('update')
        if url is None:
            url = self.member_url()
        return await self.submit(self.options.update_method, url, **kwargs)

    async def fetch(self, *, url: str = None, **kwargs) -> M:
        """ REQUIRES associated model object.

        GET the member url (or the collection url if the model has no `id`), with
        `RemoteApi.params` as the query, and merge the response into the model.
        """
        if url is None:
            if self.model.id is not None:
                url = join_collection_url(self.member_url(), self.params)
            else:
                url = self.collection_url()
        return await self.submit(HttpMethod.GET, url, **kwargs)

    async def delete(self, *, url: str = None, **kwargs) -> M:
        """ REQUIRES associated model object. DELETE the member url. """
        self._require_id('delete')
        if url is None:
            url = self.member_url()
        return await self.submit(HttpMethod.DELETE, url, **kwargs)

    # -----------------------------------
    # --------- Class Level -------------

    async def find(self, id: Any, params: Query = None, **kwargs) -> M:
        """
        Builds a new model with `id` (without any default data), fetches it and returns it.

        >>> user = await User.api.find(7)
        """
        obj = self.model_type({}, params, id=id)
        await obj.api.fetch(**kwargs)
        return obj

    async def get(
            self,
            params: Query = None,
            *,
            url: str = None,
            headers: Headers = None,
            transform_response: TransformCallback = None,
            transform_request: TransformCallback = None,
    ) -> List[M]:
        """
        GET the collection url and return a new model for each item in the response.

        Raises `xresource.remote.errors.XRemoteError` if the (transformed) response body
        is not a list of mappings.
        """
        if url is None:
            url = self.collection_url(params)

        _, body = await self._request(
            HttpMethod.GET,
            url,
            None,
            headers,
            transform_request=transform_request,
            transform_response=transform_response,
        )

        if body is None:
            return []

        if not isinstance(body, list):
            raise XRemoteError(
                f"Response to (GET {url}) for ({self.model_type.__name__}) must be a list, "
                f"but got ({type(body).__name__}) value ({body!r})."
            )

        objs = []
        for item in body:
            if not isinstance(item, Mapping):
                raise XRemoteError(
                    f"Item ({item!r}) in response to (GET {url}) for "
                    f"({self.model_type.__name__}) is not a mapping/dict."
                )
            objs.append(self.model_type(item))
        return objs

    # ----------------------------
    # --------- Private ----------

    def _require_id(self, operation: str):
        model = self.model
        if model.id is None:
            raise InvalidStateError(
                f"A ({operation}) was requested for an object that had no id for ({model})."
            )

    def _transforms(
            self,
            transform_request: Optional[TransformCallback],
            transform_response: Optional[TransformCallback],
    ) -> Tuple[TransformCallback, TransformCallback]:
        options = self.options
        return (
            transform_request or options.transform_request,
            transform_response or options.transform_response,
        )

    async def _request(
            self,
            method: HttpMethod,
            url: str,
            payload: Any,
            headers: Optional[Headers],
            *,
            transform_request: TransformCallback = None,
            transform_response: TransformCallback = None,
            obj: M = None,
    ) -> Tuple[int, Any]:
        """ Sends exactly one request through the client, returning the response status and
            the transformed response body.

            If `obj` is given, its try count goes up and a failed request or response
            transform is recorded on its response state. Success is left for the caller to
            record, once it has used the body.
        """
        transform_request, transform_response = self._transforms(
            transform_request, transform_response
        )

        payload = _run_transform(transform_request, payload, 'request', method, url)
        all_headers = {**self.options.headers, **(headers or {})}

        client = self.client
        if obj is not None:
            obj.api.response_state.try_count += 1

        try:
            response = await client.send_request(
                method, url, body=payload, headers=all_headers
            )
        except RequestError as e:
            if obj is not None:
                client.parse_send_response_error(obj, e)
            else:
                log.warning(f"Request ({method.value} {url}) failed; error: ({e}).")
            raise

        try:
            body = _run_transform(transform_response, response.body, 'response', method, url)
        except TransformError as e:
            if obj is not None:
                obj.api.response_state.mark_for_error(response.status, [str(e)])
            raise

        return response.status, body


def _run_transform(
        transform: TransformCallback, value: Any, direction: str, method: HttpMethod, url: str
) -> Any:
    try:
        return transform(value)
    except Exception as e:
        raise TransformError(
            f"The {direction} transform ({transform}) for ({method.value} {url}) "
            f"raised ({type(e).__name__}: {e}).",
            direction=direction,
        ) from e
