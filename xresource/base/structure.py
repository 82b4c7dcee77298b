"""
See `BaseStructure` for more details; This lets you discover/keep-track/find structural details
of a `xresource.base.model.BaseModel` class.
"""
import inspect
import typing_inspect
from types import MappingProxyType
from typing import (
    TypeVar, Optional, Dict, List, Type, Any, Generic, Mapping, Callable, Union, TYPE_CHECKING
)

from xresource.base.fields import Field
from xresource.common.types import JsonDict
from xresource.errors import XResourceError

F = TypeVar("F", bound=Field)

supported_basic_types = {str, int, JsonDict, bool, float, list, dict}

DefaultData = Union[Mapping[str, Any], Callable[[], Mapping[str, Any]]]

if TYPE_CHECKING:
    from xresource.base.model import BaseModel


class BaseStructure(Generic[F]):
    """
    Keeps track of things that apply to all instances of a particular
    `xresource.base.model.BaseModel` class, such as its `BaseStructure.fields` and the
    options passed in as class arguments.

    Each model class gets its own structure object, lazily configured the first time
    `xresource.base.model.BaseModel.api` is accessed on the class. Get it via:

    >>> Photo.api.structure
    """

    def __init__(
            self,
            *,
            parent: Optional['BaseStructure'],
            field_type: Type[F]
    ):
        super().__init__()

        self._name_to_type_hint_map = {}
        self._get_fields_cache = None
        self._default_data = None

        # Copy all my attributes over from parent, for use as 'default' values.
        if parent:
            self.__dict__.update(parent.__dict__)
            # noinspection PyProtectedMember
            self._name_to_type_hint_map = parent._name_to_type_hint_map.copy()

        self._get_fields_cache = None
        self.field_type = field_type
        self.internal_shared_api_values = {}

    def configure_for_model_type(
            self,
            *,
            model_type: Type['BaseModel'],
            type_hints: Dict[str, Any],
            default_data: DefaultData = None,
    ):
        """
        Called from `xresource.base.model.BaseModel.__init_subclass__` with the model class,
        its resolved type-hints, and any class arguments the model class was defined with:

        >>> class Tag(BaseModel, default_data=lambda: {'label': 'untitled'}):
        ...     label: str

        Subclasses add their own class arguments by overriding this method,
        see `xresource.remote.structure.RemoteStructure.configure_for_model_type`.

        Args:
            model_type: The model we are associated with, this is what we are configuring
                ourselves against.
            type_hints: Type-hints via Python's `get_type_hints`, for the model class.
            default_data: Attribute values used when a model is created without any data
                (ie: `Tag()` or `Tag(None)`). Either a mapping of field-name to value, or a
                callable that returns one. Inherited from parent model if not provided.
                When never provided, see `BaseStructure.default_data`.
        """
        self._name_to_type_hint_map = type_hints
        self.model_cls = model_type

        if default_data is not None:
            self._default_data = default_data

        for field_obj in self.fields:
            # The default values are inside `field_obj.default` now.
            # Deleting the class attribute lets `BaseModel.__getattr__` resolve unset attributes.
            if field_obj.name in self.model_cls.__dict__:
                delattr(self.model_cls, field_obj.name)

    # --------------------------------------------
    # --------- General Properties ---------

    model_cls: "Type[BaseModel]"
    """ The model's class we are defining the structure for. """

    field_type: Type[F]
    """ Field type this structure will use when auto-generating `xresource.base.fields.Field`'s.
    """

    internal_shared_api_values: Dict[Any, Any] = None
    """
    A place a `xresource.base.api.BaseApi` object can use to share values model-class wide.
    For example, `xresource.remote.api.RemoteApi.client` stores its object lazily here.
    """

    _name_to_type_hint_map: Dict[str, Any]
    _get_fields_cache: Dict[str, F] = None

    def get_field(self, name: str) -> Optional[F]:
        if name is None:
            return None
        return self.field_map.get(name)

    @property
    def fields(self) -> List[F]:
        return list(self.field_map.values())

    @property
    def field_map(self) -> Mapping[str, F]:
        """ Read-only map of `xresource.base.fields.Field.name` to Field objects. """
        cached_content = self._get_fields_cache
        if cached_content is not None:
            return MappingProxyType(cached_content)

        generated_fields = self._generate_fields()
        self._get_fields_cache = generated_fields
        return MappingProxyType(generated_fields)

    def default_data(self) -> JsonDict:
        """
        Returns a fresh dict of the attribute values a model starts with when it's constructed
        without any data.

        If the `default_data` class argument was given we use it, calling it if it's callable.
        Otherwise, every field that would be sent to the API (ie: not
        `xresource.base.fields.Field.read_only`) and has no declared
        `xresource.base.fields.Field.default` starts out explicitly set to `None`.
        """
        default_data = self._default_data
        if default_data is not None:
            if callable(default_data):
                default_data = default_data()
            return dict(default_data)

        return {f.name: None for f in self.fields if self._include_in_default_data(f)}

    def _include_in_default_data(self, field: F) -> bool:
        return not field.read_only and field.default is None

    def _generate_fields(self) -> Dict[str, F]:
        """ Goes though the model class and grabs/generates the Field objects.
            Gives back the definitive map of Field objects.
        """
        full_field_map = {}

        default_field_type: Type[Field] = self.field_type
        model_cls = self.model_cls
        default_converters = model_cls.api.default_converters

        from xresource.base.model import BaseModel

        # Collection of any Fields on the parent(s), the one closest to us wins per-field.
        base_fields: Dict[str, Field] = {}
        for base in reversed(model_cls.__mro__[1:]):
            if not inspect.isclass(base) or not issubclass(base, BaseModel):
                continue
            if base is BaseModel:
                continue
            base_fields.update(base.api.structure.field_map)

        for name, type_hint in self._name_to_type_hint_map.items():
            # 'api' is special, and anything starting with '_' is private.
            if name == 'api' or name.startswith("_"):
                continue

            if typing_inspect.is_classvar(type_hint):
                continue

            field_obj: Field
            field_value = model_cls.__dict__.get(name, None)
            if isinstance(field_value, Field):
                field_obj = field_value
            elif field_value is not None:
                # noinspection PyArgumentList
                field_obj = default_field_type(default=field_value)
            else:
                # noinspection PyArgumentList
                field_obj = default_field_type()

            if not isinstance(field_obj, default_field_type):
                raise XResourceError(
                    f"Field ({field_obj}) on ({model_cls}) must be a ({default_field_type})."
                )

            field_obj.resolve_defaults(
                name=name,
                type_hint=type_hint,
                default_converter_map=default_converters,
                parent_field=base_fields.get(name)
            )

            type_hint = field_obj.type_hint
            full_field_map[field_obj.name] = field_obj

            # Without a converter, we only support specific types.
            if (
                not field_obj.converter and
                type_hint not in supported_basic_types and
                typing_inspect.get_origin(type_hint) not in (list, set, dict) and
                not _is_basic_union(type_hint)
            ):
                raise XResourceError(
                    f"Unsupported type ({type_hint}) with field-name ({name}) "
                    f"for model-class ({model_cls}) in field-obj ({field_obj})."
                )

        return full_field_map


def _is_basic_union(type_hint) -> bool:
    # ie: `int | str`; values keep whichever of the types they already are.
    return typing_inspect.is_union_type(type_hint) and all(
        t in supported_basic_types for t in typing_inspect.get_args(type_hint)
    )
