"""
Maps REST resources to/from model objects, with async CRUD over an HTTP transport.

## Models

A model is a class with type-hinted attributes; the class arguments configure it:

>>> from xresource import RemoteModel
>>>
>>> class Comment(RemoteModel, base_url='/comments'):
...     body: str
...     photo_id: int

Each type-hinted attribute becomes a `xresource.base.fields.Field`. Values assigned to it are
converted to the type-hint (`comment.photo_id = "5"` stores `5`). Use a `Field` to customize
an attribute, such as where it lives in the JSON or if it's read-only:

>>> class Article(RemoteModel, base_url='/articles'):
...     title: str
...     author_name: str = Field(json_path='author.name', read_only=True)

A model created without data starts with every writable field (except `id`) set to `None`,
`Comment().api.json() == {'body': None, 'photo_id': None}`. Created from a dict, only the
values in the dict are set.

## Sending Requests

Everything related to the API is reached via `xresource.base.model.BaseModel.api`, see
`xresource.remote.api.RemoteApi`:

>>> comment = Comment({'body': 'Nice!', 'photo_id': 5})
>>> await comment.api.save()        # POST /comments
>>> comment.id
12
>>> comment.body = 'Very nice!'
>>> await comment.api.save()        # PUT /comments/12
>>> await comment.api.delete()      # DELETE /comments/12
>>> comments = await Comment.api.get({'photo_id': 5})

Every request goes through `xresource.remote.api.RemoteApi.submit`, which merges the response
into the model and raises `xresource.remote.errors.RequestError` when the service responds
with an error (the model is left unchanged).

## Transport

Requests are sent with `xresource.remote.transport.HttpxTransport` by default, using the
`XRESOURCE_BASE_URL` environment variable as the origin. Use another one by activating a
`xresource.remote.transport.DefaultTransport` (a `xinject` dependency), or per-model via
`xresource.remote.options.ApiOptions.transport`.
"""
from .base import (
    BaseModel, BaseApi, BaseStructure
)
from .base.fields import Field, Converter
from .common.types import HttpMethod
from .errors import XResourceError, ValidationError, InvalidStateError
from .remote import (
    RemoteModel, RemoteApi, ApiOptions, FormData, HttpxTransport, Transport, TransportResponse,
    DefaultTransport, RequestError, TransformError, XRemoteError, get_default_transport,
    set_default_transport
)

__all__ = [
    'BaseModel',
    'BaseApi',
    'BaseStructure',
    'Field',
    'Converter',
    'HttpMethod',
    'XResourceError',
    'ValidationError',
    'InvalidStateError',
    'RemoteModel',
    'RemoteApi',
    'ApiOptions',
    'FormData',
    'HttpxTransport',
    'Transport',
    'TransportResponse',
    'DefaultTransport',
    'RequestError',
    'TransformError',
    'XRemoteError',
    'get_default_transport',
    'set_default_transport',
]

__version__ = '0.1.0'
