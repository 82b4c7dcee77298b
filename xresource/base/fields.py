"""
`Field` objects describe how a type-hinted attribute on a `xresource.base.model.BaseModel`
maps to/from the JSON that is sent to and received from the API.

For a type-hinted model attribute without an explicit `Field`, one is generated
automatically with the default options.
"""
import dataclasses
import inspect
from enum import Enum, auto
from copy import copy
from typing import TypeVar, Any, Type, Optional, TYPE_CHECKING, Dict, Set

from xresource.common.unwrap import unwrap_optional_type

if TYPE_CHECKING:
    from xresource.base.api import BaseApi

T = TypeVar("T")


class Converter:
    """ This is meant to be a Callable that converts to/from a type when a value is assigned
        to a `xresource.base.model.BaseModel`.

        See `Converter.__call__` for the calling interface.

        You can set these on `Field.converter` or `xresource.base.api.BaseApi.default_converters`.
        A plain function with the same signature as `Converter.__call__` works as well.
    """
    class Direction(Enum):
        to_json = auto()
        """ We are converting from BaseModel into JSON. """
        from_json = auto()
        """ We are converting from JSON and need value to set on BaseModel. """
        to_model = auto()
        """ We are setting a value on the BaseModel [could be coming from anywhere]. """

    def __call__(
            self,
            api: "BaseApi",
            direction: Direction,
            field: "Field",
            value: Any,
    ) -> Any:
        """
        Gets called when something needs to be converted.

        By default, this will call one of these depending on the direction:

        - `Converter.to_json`
        - `Converter.from_json`
        - `Converter.to_model`

        Args:
            api: The `xresource.base.model.BaseModel.api` object the value belongs to.
            direction: Look at `Converter.Direction` for details.
            field: Field information, this contains the name, types, etc...
            value: The value that needs to be converted.
        """
        if direction is Converter.Direction.to_json:
            return self.to_json(api, field, value)

        if direction is Converter.Direction.from_json:
            return self.from_json(api, field, value)

        return self.to_model(api, field, value)

    # Instead of implementing `__call__`, you can implement these instead if that's easier.
    def to_json(self, api: 'BaseApi', field: 'Field', value: Any):
        raise NotImplementedError(
            f"Converter ({self}) has no __call__ or to_json method which does the conversion."
        )

    def from_json(self, api: 'BaseApi', field: 'Field', value: Any):
        raise NotImplementedError(
            f"Converter ({self}) has no __call__ or from_json method which does the conversion."
        )

    def to_model(self, api: 'BaseApi', field: 'Field', value: Any):
        raise NotImplementedError(
            f"Converter ({self}) has no __call__ or to_model method which does the conversion."
        )


@dataclasses.dataclass(eq=False)
class Field:
    """
    Provides additional options/configuration to a model field.

    If you don't provide a `Field` for a type-hinted model attribute, a default one is created
    for you. Any option left at `None` is resolved while the model class is being configured
    (ie: the first time `xresource.base.model.BaseModel.api` is accessed); see
    `Field.resolve_defaults`. The first line of each option's doc-comment says what it
    resolves to.

    >>> from xresource import BaseModel, Field
    >>> import datetime as dt
    >>>
    >>> class Article(BaseModel):
    ...     title: str
    ...     published_at: dt.datetime = Field(json_path='meta.published_at')
    ...     slug: str = Field(read_only=True)
    """

    _options_explicitly_set_by_user: Set[str] = dataclasses.field(default=None, repr=False)

    name: str = None
    """ (Default: Parent, Name of attribute on BaseModel) """

    type_hint: Type = None
    """ (Default: The type-hint of the attribute, with any `Optional` unwrapped)
        Always set from the model's annotations, so a subclass can override it without
        needing its own `Field`.
    """

    json_path: str = None
    """ (Default: Parent, `Field.name`)
        Path to the value inside the JSON document, with each key separated by
        `Field.json_path_separator`. Lets a flat model attribute map into a nested JSON object.
    """

    json_path_separator: str = None
    """ (Default: Parent, `.`) """

    default: Any = None
    """ (Default: Parent, `None`)
        Value returned for the attribute when nothing has been set on it.
        If callable (ie: `list`), it's called without arguments each time a default is needed.
        When a non-Field value is assigned to a type-hinted attribute at class level, that value
        becomes the default of the generated Field.
    """

    read_only: bool = None
    """ (Default: Parent, `False`)
        If `True`, the value is read from responses but never sent to the API.
    """

    include_in_repr: bool = None
    """ (Default: Parent, `False`)
        If `True`, the value is included in the model's `repr`.
    """

    converter: Optional[Converter] = None
    """ (Default: Parent if set explicitly by user; otherwise default converter for
        `Field.type_hint`, see `xresource.base.api.BaseApi.default_converters`)

        Used to convert values to/from json, and when values are assigned to the model.
    """

    def was_option_explicitly_set_by_user(self, option_name: str) -> bool:
        return option_name in self._options_explicitly_set_by_user

    def resolve_defaults(
            self,
            *,
            name: str,
            type_hint: Type,
            default_converter_map: Optional[Dict[Type, Converter]] = None,
            parent_field: "Field" = None
    ):
        """
        Resolves all options on self that are still set to `None`.

        1. Options the user explicitly set on the parent field (on a parent model class) are
           copied onto us, unless we also set them explicitly.
        2. Everything else that's still `None` is resolved to its standard default.

        Options the parent resolved automatically are resolved again for us, so a subclass
        that changes a field's type-hint gets the converter for the new type and not the
        parent's.
        """
        if parent_field:
            options_explicitly_set_by_user = set(parent_field._options_explicitly_set_by_user)
        else:
            options_explicitly_set_by_user = set()

        for data_field in dataclasses.fields(self):
            if data_field.name == '_options_explicitly_set_by_user':
                continue
            if getattr(self, data_field.name) is not None:
                options_explicitly_set_by_user.add(data_field.name)

        if parent_field:
            for data_field in dataclasses.fields(parent_field):
                option = data_field.name
                if option not in parent_field._options_explicitly_set_by_user:
                    continue
                if getattr(self, option) is None:
                    setattr(self, option, copy(getattr(parent_field, option)))

        self._options_explicitly_set_by_user = options_explicitly_set_by_user

        if type_hint is not None:
            self.type_hint = unwrap_optional_type(type_hint)

        if self.name is None:
            self.name = name

        if self.json_path is None:
            self.json_path = self.name

        if self.json_path_separator is None:
            self.json_path_separator = '.'

        if self.read_only is None:
            self.read_only = False

        if self.include_in_repr is None:
            self.include_in_repr = False

        if self.converter is None and default_converter_map:
            self.converter = default_converter_map.get(self.type_hint)

        if (
            self.converter is None and
            inspect.isclass(self.type_hint) and
            issubclass(self.type_hint, Enum)
        ):
            from xresource.converters import EnumConverter
            self.converter = EnumConverter()

    @property
    def json_path_keys(self):
        return self.json_path.split(self.json_path_separator)
