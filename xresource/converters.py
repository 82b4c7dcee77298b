"""
Converters used for a field when its `xresource.base.fields.Field` does not name one;
see `xresource.base.api.BaseApi.default_converters`.

Most are a `ValueConverter`, which pairs a parse function (anything -> the field's type) with
a format function (the field's type -> a JSON-friendly value):

>>> DEFAULT_CONVERTERS[dt.date](api, Converter.Direction.from_json, field, '2024-05-01')
datetime.date(2024, 5, 1)
"""
import datetime as dt
from decimal import Decimal
from typing import Any, Callable, Dict, Optional, Type, TYPE_CHECKING

import ciso8601

from xresource.base.fields import Converter, Field

if TYPE_CHECKING:
    from xresource.base.api import BaseApi

_TRUE_STRINGS = frozenset({'y', 'yes', 't', 'true', 'on', '1'})
_FALSE_STRINGS = frozenset({'n', 'no', 'f', 'false', 'off', '0'})


def to_datetime(value: Any) -> dt.datetime:
    """ ISO-8601 strings are parsed with `ciso8601`; a plain date becomes midnight UTC. """
    if isinstance(value, dt.datetime):
        return value

    if isinstance(value, dt.date):
        return dt.datetime(value.year, value.month, value.day, tzinfo=dt.timezone.utc)

    if isinstance(value, str):
        return ciso8601.parse_datetime(value)

    raise ValueError(f"Can't get a datetime out of ({value!r}), expected an ISO-8601 string.")


def to_date(value: Any) -> dt.date:
    if isinstance(value, dt.datetime):
        return value.date()

    if isinstance(value, dt.date):
        return value

    if isinstance(value, str):
        # Also accepts a full timestamp, the time part is dropped.
        return ciso8601.parse_datetime(value).date()

    raise ValueError(f"Can't get a date out of ({value!r}), expected an ISO-8601 string.")


def to_bool(value: Any) -> bool:
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True
        if lowered in _FALSE_STRINGS:
            return False
        raise ValueError(f"Invalid truth value ({value!r}).")
    return bool(value)


def to_decimal(value: Any) -> Decimal:
    if isinstance(value, float):
        # Through `str`, so 1.1 stays 1.1 and not its binary approximation.
        value = str(value)
    return Decimal(value)


def format_decimal(value: Any) -> str:
    if isinstance(value, Decimal):
        # Fixed-point, never an exponent like '1E-5'.
        return f"{value:f}"
    return str(value)


def format_datetime(value: Any) -> str:
    """ Datetimes always go out as ISO-8601 in UTC. """
    return to_datetime(value).astimezone(dt.timezone.utc).isoformat()


def format_date(value: Any) -> str:
    return to_date(value).isoformat()


class ValueConverter(Converter):
    """
    Converts values for fields of `value_type`.

    Going into the model (`from_json` and `to_model`), a value that is already exactly
    `value_type` is kept, anything else is given to `parse`. Going out (`to_json`) the value
    is given to `format`, or sent as-is without one. `None` is always left alone.

    >>> ValueConverter(int)(api, Converter.Direction.to_model, field, "12")
    12
    """

    def __init__(
            self,
            value_type: Type,
            parse: Callable[[Any], Any] = None,
            format: Optional[Callable[[Any], Any]] = None
    ):
        self.value_type = value_type
        self.parse = parse or value_type
        self.format = format

    def __call__(
            self,
            api: "BaseApi",
            direction: Converter.Direction,
            field: Field,
            value: Any
    ) -> Any:
        if value is None:
            return None

        if direction is Converter.Direction.to_json:
            return self.format(value) if self.format else value

        if type(value) is self.value_type:
            return value

        return self.parse(value)

    def __repr__(self):
        return f"ValueConverter({self.value_type.__name__})"


class EnumConverter(Converter):
    """ Enum fields are sent as their `value`, and looked up by value when received. """

    def to_model(self, api: 'BaseApi', field: 'Field', value: Any):
        if value is None or isinstance(value, field.type_hint):
            return value
        return field.type_hint(value)

    def from_json(self, api: 'BaseApi', field: 'Field', value: Any):
        return self.to_model(api, field, value)

    def to_json(self, api: 'BaseApi', field: 'Field', value: Any):
        return None if value is None else value.value


DEFAULT_CONVERTERS: Dict[Type, Converter] = {
    int: ValueConverter(int),
    float: ValueConverter(float),
    str: ValueConverter(str),
    bool: ValueConverter(bool, to_bool),
    Decimal: ValueConverter(Decimal, to_decimal, format_decimal),
    dt.date: ValueConverter(dt.date, to_date, format_date),
    dt.datetime: ValueConverter(dt.datetime, to_datetime, format_datetime),
}
