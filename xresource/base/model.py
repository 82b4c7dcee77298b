import json
import typing
import typing_inspect
from abc import ABC
from collections.abc import Mapping
from logging import getLogger
from typing import get_type_hints, TYPE_CHECKING, Type, Any, Callable, Self, TypeVar

from xresource.base.fields import Field, Converter
from xresource.common.lazy import LazyClassAttr
from xresource.errors import XResourceError

if TYPE_CHECKING:
    # Allows IDE to get type reference without a circular import issue.
    from xresource.base.api import BaseApi

log = getLogger(__name__)

M = TypeVar('M')


@typing.dataclass_transform()
class BaseModel(ABC):
    """
    Abstract base-class for objects whose attributes map to/from a JSON document.

    Type-hinted attributes become `xresource.base.fields.Field`'s, values assigned to them are
    converted to the type-hint if needed. Attributes that start with `_` or don't have a
    type-hint are plain Python attributes and are never mapped.

    You can pass class arguments in when you declare your subclass, they are sent to
    `xresource.base.structure.BaseStructure.configure_for_model_type`
    (and its overrides, such as `xresource.remote.structure.RemoteStructure`):

    >>> from xresource.remote import RemoteModel
    >>> class Comment(RemoteModel, base_url='/comments'):
    ...    body: str
    ...    photo_id: int

    Everything related to the API is reached via `BaseModel.api`, keeping the rest of the
    namespace free for model attributes.
    """

    api: "BaseApi[Self]" = None
    """ Used to access the api object, which does the work of exporting/merging json and
        (for remote models) sending requests.

        Accessed via the class (ie: `Photo.api`) it's the class-wide api, accessed via an
        instance (ie: `photo.api`) it's an api associated with that instance.

        You can specify this as a type-hint in subclasses to change the class we use for it:

        >>> class PhotoApi(RemoteApi[M]):
        ...     pass
        >>>
        >>> class Photo(RemoteModel, base_url='/photos'):
        ...     api: PhotoApi[Self]
    """

    def __init_subclass__(
        cls: Type[M],
        *,
        lazy_loader: Callable[[Type[M]], None] = None,
        **kwargs
    ):
        """
        We take all arguments (except `lazy_loader`) passed in here and send them to
        `xresource.base.structure.BaseStructure.configure_for_model_type`.

        Model classes are configured lazily, the first time `BaseModel.api` is accessed
        on the class (which also happens when the first instance is created).

        Args:
            lazy_loader: Optional callable, called with the model class right before we resolve
                its type-hints. Used to import forward-referenced types into the module where
                the class lives (ie: to resolve circular imports).
        """
        super().__init_subclass__()

        def lazy_setup_api(cls_or_self):
            if lazy_loader:
                lazy_loader(cls)

            for parent in cls.mro():
                if parent is not cls and issubclass(parent, BaseModel):
                    # Ensure that parent-class has a chance to lazy-load itself first.
                    getattr(parent, 'api')

            if 'BaseApi' not in globals():
                # Lazy import BaseApi, to resolve the `api: "BaseApi[Self]"` forward-ref below.
                from xresource.base.api import BaseApi
                globals()['BaseApi'] = BaseApi

            try:
                all_type_hints = get_type_hints(cls)
            except (NameError, AttributeError) as e:
                raise XResourceError(
                    f"Unable to construct model subclass ({cls}) due to error resolving "
                    f"type-hints on model class. They must be visible at the module-level that "
                    f"the class is defined in. Original error: ({e})."
                ) from None

            api_hint = all_type_hints['api']
            api_cls: Type["BaseApi"] = typing_inspect.get_origin(api_hint) or api_hint

            base_api = None
            for b in cls.__bases__:
                if b is not BaseModel and issubclass(b, BaseModel):
                    base_api = b.api
                    break

            api = api_cls(api=base_api)
            cls.api = api

            structure = api.structure
            try:
                structure.configure_for_model_type(
                    model_type=cls,
                    type_hints=all_type_hints,
                    **kwargs
                )
            except TypeError as e:
                raise XResourceError(
                    f"Unable to configure model structure for ({cls}) due to error ({e}) "
                    f"while calling ({structure}.configure_for_model_type)."
                )
            return api

        # Turns into the real api object the first time it's accessed.
        setattr(cls, "api", LazyClassAttr(lazy_setup_api, name="api"))

    def __init__(self, data: Any = None, **initial_values):
        """
        Creates a new model object. Everything is optional.

        Args:
            data: Initial attribute values; if:

                - `None`: We start with the values from
                    `xresource.base.structure.BaseStructure.default_data`.
                - Mapping: Merged in via `xresource.base.api.BaseApi.update_from_json`,
                    defaults are NOT applied.
                - `str`: Parsed as a JSON object, then merged as above.
                - `BaseModel`: Copy over the values of fields with the same name.

            **initial_values: Other attribute values for convenience, set after `data`.
                `ModelClass(some_attr=v)` is the same as `model_obj.some_attr = v`.
        """
        cls_api_type = type(type(self).api)
        api = cls_api_type(model=self)
        setattr(self, "api", api)

        if data is None:
            for k, v in api.structure.default_data().items():
                setattr(self, k, v)
        elif isinstance(data, str):
            api.update_from_json(json.loads(data))
        elif isinstance(data, BaseModel):
            api.copy_from_model(data)
        elif isinstance(data, Mapping):
            api.update_from_json(data)
        else:
            raise XResourceError(
                f"When a first argument to {type(self).__name__}(...) is provided, it needs to "
                f"be a mapping/dict with the json values in it "
                f"OR a BaseModel instance to copy from "
                f"OR a str with a json dict/obj to parse inside of string; "
                f"I was given a type ({type(data)}) with value ({data}) instead."
            )

        for k, v in initial_values.items():
            if not api.structure.get_field(k):
                raise XResourceError(
                    f"While constructing {self}, init method got a value for an "
                    f"unknown field ({k})."
                )

            setattr(self, k, v)

    def __repr__(self):
        msgs = []
        for attr in self.api.list_of_attrs_to_repr():
            msgs.append(f'{attr}={getattr(self, attr, None)!r}')

        full_message = ", ".join(msgs)
        return f"{self.__class__.__name__}({full_message})"

    def __setattr__(self, name, value):
        if name == "api" or name.startswith("_"):
            super().__setattr__(name, value)
            return

        field = self.api.structure.get_field(name)
        if not field:
            # Just a normal python attribute of some sort, not tied with API.
            super().__setattr__(name, value)
            return

        if value is not None:
            value = value_for_field(self.api, field, value)

        super().__setattr__(name, value)

    def __getattr__(self, name: str):
        # Only gets called if attribute is not currently defined on self.
        if name.startswith("_") or name == "api":
            return object.__getattribute__(self, name)

        field = self.api.structure.get_field(name)
        if not field:
            raise AttributeError(
                f"Getting ({name}) on ({self.__class__.__name__}), which does not exist on object "
                f"or in API. For API objects, you need to use already defined fields/attributes."
            )

        # Store any default, so a mutable default (ie: a list) is kept on the object.
        default = get_default_value_from_field(self, field)
        if default is not None:
            super().__setattr__(name, default)
        return default

    def __eq__(self, other):
        """ Identity is based on object instance, not any values in our attributes. """
        return self is other

    def __hash__(self):
        return id(self)


def value_for_field(api: "BaseApi", field: Field, value: Any) -> Any:
    """
    Returns `value` converted into what should be stored for `field`.
    Raises `AttributeError` if we don't know how to convert it.

    `xresource.base.api.BaseApi.update_from_json` uses this to convert every value before
    assigning any of them.
    """
    type_hint = field.type_hint
    value_type = type(value)

    converter = field.converter
    if typing_inspect.is_union_type(type_hint):
        # A value that is already one of the union's types is kept as-is,
        # anything else is converted to the first type in the union.
        hint_union_sub_types = typing_inspect.get_args(type_hint)
        if value_type in hint_union_sub_types:
            return value
        type_hint = hint_union_sub_types[0]
        if converter is None:
            converter = api.default_converters.get(type_hint)

    origin = typing_inspect.get_origin(type_hint)

    try:
        if value_type is type_hint or (origin is not None and isinstance(value, origin)):
            if origin in (list, set):
                args = typing_inspect.get_args(type_hint)
                inner_converter = api.default_converters.get(args[0]) if args else None
                if inner_converter:
                    value = origin(
                        inner_converter(api, Converter.Direction.to_model, field, x)
                        for x in value
                    )
            return value

        if converter:
            return converter(api, Converter.Direction.to_model, field, value)

        if type_hint in (list, dict) and isinstance(value, type_hint):
            return value

        if origin in (list, set) and isinstance(value, (list, set, tuple)):
            return origin(value)
    except (ValueError, TypeError) as e:
        raise AttributeError(
            f"Parsing value ({value!r}) with type-hint ({type_hint}) resulted in an error "
            f"for attribute ({field.name}); error: ({e})."
        ) from e

    raise AttributeError(
        f"Setting name ({field.name}) with value ({value!r}) with type ({value_type}) "
        f"but type-hint is ({type_hint}), and I don't know how to auto-convert type "
        f"({value_type}) into ({type_hint})."
    )


def get_default_value_from_field(model: BaseModel, field: Field) -> Any:
    default = field.default
    if default is None:
        return None

    # If it's callable, we call it; it could be a list or a dict type or a function.
    if callable(default):
        default = default()

    return value_for_field(model.api, field, default)
