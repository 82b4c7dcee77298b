from typing import TypeVar

import pytest

from xresource import BaseApi, BaseModel, BaseStructure, Field, XResourceError
from xresource.converters import DEFAULT_CONVERTERS

M = TypeVar('M')
F = TypeVar('F', bound=Field)


def none_converter(*args, **kwargs):
    pass


def str_converter(*args, **kwargs):
    pass


class MyFirstApi(BaseApi[M]):
    default_converters = {
        None: none_converter
    }


class MySecondApi(MyFirstApi[M]):
    default_converters = {
        str: str_converter
    }


class CommonModel(BaseModel):
    api: MyFirstApi


class MyFirstModel(CommonModel):
    pass


class MySecondModel(CommonModel):
    api: MySecondApi


def test_default_converters_inherit():
    assert MyFirstApi.default_converters == {None: none_converter}
    assert MyFirstModel.api.default_converters == {
        **DEFAULT_CONVERTERS,
        **{None: none_converter}
    }

    assert MySecondApi.default_converters == {str: str_converter}
    assert MySecondModel.api.default_converters == {
        **DEFAULT_CONVERTERS,
        **{None: none_converter},
        **{str: str_converter}
    }


class MyStructure(BaseStructure[F]):
    pass


class StructuredApi(BaseApi[M]):
    structure: MyStructure[Field]


class StructuredModel(BaseModel):
    api: StructuredApi

    name: str


def test_api_type_hints_choose_types():
    assert type(StructuredModel.api) is StructuredApi
    assert type(StructuredModel.api.structure) is MyStructure
    assert StructuredModel.api.model_type is StructuredModel

    obj = StructuredModel()
    assert type(obj.api) is StructuredApi
    assert obj.api is not StructuredModel.api
    assert obj.api.structure is StructuredModel.api.structure
    assert obj.api.model is obj


def test_api_needs_model_for_model_methods():
    with pytest.raises(XResourceError):
        StructuredModel.api.model

    with pytest.raises(XResourceError):
        BaseApi(api=StructuredModel.api, model=StructuredModel())
