# *********************************************************************************************
# Only basic types go in here, no real logic should be in this module.
#
# Other modules commonly do `from xresource.common.types import ...` to get these basic types.
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Sequence

# `Query` is re-exported for the rest of the package.
from xurls.url import Query

from xresource.errors import ValidationError

JsonDict = Dict[str, Any]
"""
`Dict[str, Any]`: This represents a JSON type of dict, with string keys and any value.
"""

FieldNames = Sequence[str]
""" `Sequence[str]`: Represents a list of field names. """

Headers = Mapping[str, str]

TransformCallback = Callable[[Any], Any]
"""
A request or response transform; given the outgoing payload (or incoming response body)
and returns what should be used in its place.
"""


class HttpMethod(str, Enum):
    GET = 'GET'
    POST = 'POST'
    PUT = 'PUT'
    PATCH = 'PATCH'
    DELETE = 'DELETE'

    @classmethod
    def parse(cls, value: "str | HttpMethod") -> "HttpMethod":
        """ Accepts an `HttpMethod` or its name in any case (ie: `'post'`). """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise ValidationError(
                f"Unsupported HTTP method ({value}), must be one of "
                f"({', '.join(m.value for m in cls)})."
            ) from None

    @property
    def has_body(self) -> bool:
        """ True for methods that send the model's attributes by default. """
        return self in (HttpMethod.POST, HttpMethod.PUT, HttpMethod.PATCH)
