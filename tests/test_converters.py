import datetime as dt
from decimal import Decimal

import pytest

from xresource import BaseModel, Field, XResourceError
from xresource.converters import (
    Converter, DEFAULT_CONVERTERS, ValueConverter, to_bool, to_datetime, to_date
)


class BasicModel(BaseModel):
    field_int: int
    field_str: str
    field_date: dt.date
    field_time: dt.datetime
    field_bool: bool
    field_float: float
    field_decimal: Decimal


def test_int_converter():
    converter = DEFAULT_CONVERTERS[int]
    model = BasicModel()
    field = BasicModel.api.structure.get_field('field_int')
    assert converter(model.api, Converter.Direction.from_json, field, '12') == 12
    assert converter(model.api, Converter.Direction.to_model, field, 12.0) == 12
    assert converter(model.api, Converter.Direction.to_json, field, 7) == 7

    with pytest.raises(ValueError):
        converter(model.api, Converter.Direction.to_model, field, '')


def test_bool_converter():
    converter = DEFAULT_CONVERTERS[bool]
    model = BasicModel()
    field = BasicModel.api.structure.get_field('field_bool')
    assert converter(model.api, Converter.Direction.to_model, field, 'Yes') is True
    assert converter(model.api, Converter.Direction.to_model, field, 'off') is False
    assert converter(model.api, Converter.Direction.to_model, field, 1) is True

    with pytest.raises(ValueError):
        to_bool('maybe')


def test_decimal_converter():
    field = BasicModel.api.structure.get_field('field_decimal')
    converter = field.converter
    model = BasicModel()
    assert converter(model.api, Converter.Direction.to_model, field, '1.03') == Decimal('1.03')
    assert converter(model.api, Converter.Direction.to_model, field, 1.1) == Decimal('1.1')
    assert converter(model.api, Converter.Direction.to_json, field, Decimal('2.03')) == '2.03'
    assert converter(model.api, Converter.Direction.to_json, field, Decimal('1E-5')) == '0.00001'


def test_default_converters_against_none():
    obj = BasicModel()
    for field in BasicModel.api.structure.fields:
        type_hint = field.type_hint
        converter = DEFAULT_CONVERTERS[type_hint]
        result = converter(obj.api, Converter.Direction.to_json, field, None)
        assert result is None

        if type_hint not in (int, float, str, bool):
            continue
        blank_value = type_hint()
        result = converter(obj.api, Converter.Direction.to_json, field, type_hint())
        assert result == blank_value


def test_datetime_converter():
    field = BasicModel.api.structure.get_field('field_time')
    api = BasicModel().api
    converter = field.converter

    value = converter(api, Converter.Direction.from_json, field, '2024-05-01T12:30:00Z')
    assert value == dt.datetime(2024, 5, 1, 12, 30, tzinfo=dt.timezone.utc)

    eastern = dt.timezone(dt.timedelta(hours=-4))
    local = dt.datetime(2024, 5, 1, 8, 30, tzinfo=eastern)
    assert converter(api, Converter.Direction.to_json, field, local) == (
        '2024-05-01T12:30:00+00:00'
    )

    assert to_datetime(dt.date(2024, 5, 1)) == dt.datetime(2024, 5, 1, tzinfo=dt.timezone.utc)

    with pytest.raises(ValueError):
        to_datetime(12)


def test_bad_datetime_in_json_is_an_error():
    obj = BasicModel()
    with pytest.raises(XResourceError):
        obj.api.update_from_json({'field_time': 12})

    with pytest.raises(XResourceError):
        obj.api.update_from_json({'field_time': 'not-a-timestamp'})

    assert obj.field_time is None


def test_date_converter():
    field = BasicModel.api.structure.get_field('field_date')
    api = BasicModel().api
    converter = field.converter

    assert converter(api, Converter.Direction.from_json, field, '2024-05-01') == (
        dt.date(2024, 5, 1)
    )
    assert converter(api, Converter.Direction.to_json, field, dt.date(2024, 5, 1)) == (
        '2024-05-01'
    )
    assert to_date('2024-05-01T23:10:00Z') == dt.date(2024, 5, 1)


def test_value_converter_keeps_exact_type():
    converter = ValueConverter(str, format=str.upper)
    field = BasicModel.api.structure.get_field('field_str')
    api = BasicModel().api

    assert converter(api, Converter.Direction.to_model, field, 'abc') == 'abc'
    assert converter(api, Converter.Direction.to_model, field, 5) == '5'
    assert converter(api, Converter.Direction.to_json, field, 'abc') == 'ABC'


def test_model_values_use_converters():
    obj = BasicModel()
    obj.field_date = '2023-01-02'
    obj.field_float = '1.5'
    obj.field_str = 10

    assert obj.field_date == dt.date(2023, 1, 2)
    assert obj.field_float == 1.5
    assert obj.field_str == '10'
    assert obj.api.json()['field_date'] == '2023-01-02'


def test_default_model_values_use_converters():
    class B2Model(BaseModel):
        f1: int
        f2: Decimal = Field(default='10.32')

    b2 = B2Model()
    assert b2.f2 == Decimal('10.32')
    assert b2.api.json() == {'f1': None, 'f2': '10.32'}
