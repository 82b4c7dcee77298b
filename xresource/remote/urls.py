"""
Helpers to compute a model's member and collection urls; used by
`xresource.remote.api.RemoteApi.member_url` and `xresource.remote.api.RemoteApi.collection_url`.

Both are built with `xurls.url.Url`.
"""
from collections.abc import Mapping
from typing import Any, Optional

from xurls.url import Url, DuplicateKeyNamesQueryValueListFormat

from xresource.common.types import Query
from xresource.errors import InvalidStateError


def join_member_url(base_url: str, id: Any, *segments: str) -> str:
    """
    >>> join_member_url('/photos', 42)
    '/photos/42'
    >>> join_member_url('/photos/', 42, 'upload')
    '/photos/42/upload'

    The `id` is always quoted as a single path segment (ie: a `/` in it becomes `%2F`).
    Raises `xresource.errors.InvalidStateError` if `id` is `None`.
    """
    if id is None:
        raise InvalidStateError(
            f"Can't build a member url under ({base_url}) for an object without an `id`."
        )

    url = Url(base_url or '').append_path('{id}')
    for segment in segments:
        url.append_path(segment)

    return url.format(secondary_values={'id': id})


def join_collection_url(base_url: str, params: Optional[Query] = None) -> str:
    """
    >>> join_collection_url('/users', {'page': 2, 'tag': ['a', 'b'], 'q': None})
    '/users?page=2&tag=a&tag=b'

    `None` values are left out; a list value becomes a repeated key in the query.
    """
    if params is not None and not isinstance(params, Mapping):
        raise TypeError(f"Query params must be a mapping, got ({params!r}).")

    url = Url(base_url or '', formatting_options=DuplicateKeyNamesQueryValueListFormat)
    url.append_query(params)
    return url.format(allow_invalid_url=True)
