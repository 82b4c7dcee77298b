"""
## Api Class Overview

This module houses the `BaseApi` class, the bridge between a `xresource.base.model.BaseModel`
and everything that does work on its behalf (exporting/merging JSON here; sending requests
in `xresource.remote.api.RemoteApi`).

In order to reduce name-collisions with normal model attributes, everything the model needs
is gotten through `xresource.base.model.BaseModel.api`:

>>> photo = Photo({'title': 'Sunset'})
>>> photo.api.json()
{'title': 'Sunset'}

The `BaseApi` instance is different depending on how you access it. Via the model class
(`Photo.api`) it's the class-wide api and has no model. Via a model instance (`photo.api`) it's a
lightweight copy that knows its model, and can keep per-instance state.

### Use of type-hints for changing used type

`BaseApi` allocates the type declared by its type-hints, so subclasses can swap in their own:

>>> class MyStructure(BaseStructure[F]):
...     pass
>>>
>>> class MyApi(BaseApi[M]):
...     structure: MyStructure[Field]
>>>
>>> class MyModel(BaseModel):
...     api: MyApi[Self]
"""
import typing_inspect
from collections.abc import Mapping
from logging import getLogger
from typing import TypeVar, Dict, List, Any, Optional, Type, Union, Generic, get_type_hints

from xresource.base.fields import Field, Converter
from xresource.base.model import BaseModel, value_for_field
from xresource.base.structure import BaseStructure
from xresource.common.types import JsonDict
from xresource.converters import DEFAULT_CONVERTERS
from xresource.errors import XResourceError

log = getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class BaseApi(Generic[M]):
    """
    Central hub that ties a model class/instance to its structure and converters.

    You get the correct instance via `xresource.base.model.BaseModel.api`.
    Methods whose docs start with "REQUIRES associated model" need an api gotten through a
    model instance.
    """

    # PyCharm ignores a type-hint in subclasses when a property with the same name implements
    # it; so the property is defined as `_structure` and then renamed below.
    structure: BaseStructure[Field]

    @property
    def _structure(self):
        """
        Contains things that don't vary among the model instances, such as the
        `xresource.base.fields.Field` list via `xresource.base.structure.BaseStructure.fields`.

        It's the same object for the class api and every instance api of a model class.
        """
        return self._structure

    structure = _structure

    _structure = None

    default_converters: Dict[Type[Any], Converter] = None
    """
    Maps a type-hint to the converter used for fields with that type-hint, when the
    `xresource.base.fields.Field` does not specify its own converter.

    When an api is allocated for a model class, we merge, with later ones taking precedence:

    1. `xresource.converters.DEFAULT_CONVERTERS`
    2. `default_converters` of the parent model's api.
    3. `default_converters` declared directly on the `BaseApi` subclass.
    """

    _model: Optional[BaseModel] = None

    @property
    def model_type(self) -> Type[M]:
        """ The model class this api is associated with. """
        # noinspection PyTypeChecker
        return self.structure.model_cls

    # noinspection PyMissingConstructor
    def __init__(self, *, api: "BaseApi[M]" = None, model: BaseModel = None):
        """
        Normally you don't create `BaseApi` objects yourself,
        `xresource.base.model.BaseModel` does it for you.

        Args:
            api: The parent model class's api; used when allocating the api for a new
                model class. Its structure is copied as a starting point.
            model: Model instance to associate the new api with; the structure and converters
                are shared with the model class's api.
        """
        if api and model:
            raise XResourceError(
                f"You can't pass in an BaseApi {api} and BaseModel {model} simultaneously."
            )

        if model:
            class_api = type(model).api
            self._structure = class_api.structure
            self.default_converters = class_api.default_converters
            self._model = model
            return

        # We are being allocated for a model class; use the structure type our type-hint wants.
        structure_type = get_type_hints(type(self)).get('structure', BaseStructure[Field])

        args = typing_inspect.get_args(structure_type)
        field_type = args[0] if args else Field
        structure_cls = typing_inspect.get_origin(structure_type) or structure_type

        existing_struct = api.structure if api else None
        self._structure = structure_cls(parent=existing_struct, field_type=field_type)

        self.default_converters = {
            **DEFAULT_CONVERTERS,
            **((api.default_converters or {}) if api else {}),
            **(type(self).default_converters or {}),
        }

    @property
    def model(self) -> M:
        """ REQUIRES associated model object.

        The model instance associated with this api. Raises `XResourceError` when this api was
        gotten through the model class (ie: `Photo.api.model`).
        """
        model = self._model
        if model is None:
            raise XResourceError(
                f"BaseApi ({self}) needs an attached model obj and there is none; "
                f"use the api of a model instance (ie: `model_obj.api`)."
            )
        return model

    def json(self) -> JsonDict:
        """ REQUIRES associated model object.

        Returns the associated model as a JsonDict, ready to be encoded and sent to the API.

        Includes every field that is not `xresource.base.fields.Field.read_only` and was set
        on the model (even when set to `None`), plus unset fields with a non-`None` default.
        Values are passed through the field's converter, nested `json_path`'s create nested
        dicts and sets become lists.

        The returned dict is a new copy, and so can be mutated by the caller.
        """
        model = self.model
        model_values = model.__dict__

        json: JsonDict = {}
        for field_obj in self.structure.fields:
            if field_obj.read_only:
                continue

            name = field_obj.name
            if name not in model_values and field_obj.default is None:
                continue

            value = getattr(model, name)
            if value is not None and field_obj.converter:
                value = field_obj.converter(self, Converter.Direction.to_json, field_obj, value)

            if isinstance(value, set):
                value = list(value)

            *parents, key = field_obj.json_path_keys
            d = json
            for parent_key in parents:
                d = d.setdefault(parent_key, {})
            d[key] = value

        return json

    def copy_from_model(self, model: BaseModel):
        """ REQUIRES associated model object.

        Copies the values the other model has set, for fields that exist on both models.
        """
        their_fields = model.api.structure.field_map
        my_fields = self.structure.field_map
        their_values = model.__dict__

        my_model = self.model
        for k in their_fields:
            if k in my_fields and k in their_values:
                setattr(my_model, k, their_values[k])

    def update_from_json(self, json: Union[JsonDict, Mapping]):
        """ REQUIRES associated model object.

        Merges the values in `json` into the model. Only fields present in `json` are
        touched; a `null` value sets the attribute to `None`. Keys that don't map to a field
        are ignored.

        Every value is converted before anything is assigned, so if a value can't be
        converted we raise `XResourceError` and the model is left as it was.
        """
        if not isinstance(json, Mapping):
            raise XResourceError(
                f"update_from_json(...) was given a non-mapping parameter ({json})."
            )

        model = self.model
        used_keys = set()
        values = {}
        for field_obj in self.structure.fields:
            v = json
            got_value = True
            for key in field_obj.json_path_keys:
                if not isinstance(v, Mapping) or key not in v:
                    # Not even a `None` value, so the API did not send it; leave attr alone.
                    got_value = False
                    break
                v = v[key]

            if not got_value:
                continue

            used_keys.add(field_obj.json_path_keys[0])

            if v is not None:
                try:
                    if field_obj.converter:
                        v = field_obj.converter(
                            self, Converter.Direction.from_json, field_obj, v
                        )
                    v = value_for_field(self, field_obj, v)
                except (ValueError, TypeError, AttributeError) as e:
                    raise XResourceError(
                        f"Unable to merge value ({v!r}) for field ({field_obj.name}) into "
                        f"model ({type(model).__name__}); error: ({e})."
                    ) from e

            values[field_obj.name] = v

        unknown_keys = [k for k in json if k not in used_keys]
        if unknown_keys:
            log.debug(
                f"Ignoring keys ({unknown_keys}) with no matching field while merging json "
                f"into model ({type(model).__name__})."
            )

        for name, value in values.items():
            setattr(model, name, value)

    def list_of_attrs_to_repr(self) -> List[str]:
        """ REQUIRES associated model object.

        A list of attribute names to put into the `repr` of the associated model.
        """
        return [f.name for f in self.structure.fields if f.include_in_repr]
