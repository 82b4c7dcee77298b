import json
from decimal import Decimal
from typing import List

import pytest

from xresource import BaseModel, Field, XResourceError


class Article(BaseModel):
    title: str
    views: int
    rating: Decimal
    author_name: str = Field(json_path='author.name')


class Note(BaseModel, default_data={'text': 'untitled'}):
    text: str
    pinned: bool


class Counter(BaseModel, default_data=lambda: {'count': 0}):
    count: int


def test_no_data_applies_default_data():
    article = Article()
    assert article.api.json() == {
        'title': None,
        'views': None,
        'rating': None,
        'author': {'name': None},
    }


def test_default_data_class_argument():
    note = Note()
    assert note.text == 'untitled'
    assert note.api.json() == {'text': 'untitled'}

    # Callable default data is called for each new object.
    counter = Counter()
    counter.count += 1
    assert Counter().count == 0
    assert counter.count == 1


def test_mapping_data_bypasses_defaults():
    article = Article({'title': 'Hello', 'views': '3', 'author': {'name': 'Ann'}})
    assert article.title == 'Hello'
    assert article.views == 3
    assert article.author_name == 'Ann'
    assert article.api.json() == {'title': 'Hello', 'views': 3, 'author': {'name': 'Ann'}}

    assert Note({}).api.json() == {}


def test_str_data_is_parsed_as_json():
    article = Article(json.dumps({'title': 'Parsed', 'rating': '4.5'}))
    assert article.title == 'Parsed'
    assert article.rating == Decimal('4.5')


def test_model_data_is_copied():
    original = Article({'title': 'Original', 'views': 10})
    copied = Article(original)
    assert copied.api.json() == {'title': 'Original', 'views': 10}
    assert copied is not original


def test_initial_values():
    article = Article({'title': 'Hello'}, views=7)
    assert article.views == 7

    with pytest.raises(XResourceError):
        Article(not_a_field=1)


def test_invalid_data_type():
    with pytest.raises(XResourceError):
        Article(12)


def test_attribute_conversion_errors():
    article = Article()
    with pytest.raises(AttributeError):
        article.views = 'not-a-number'

    with pytest.raises(AttributeError):
        article.not_a_field

    # Attributes without a type-hint are normal python attributes.
    article.scratch = object()
    assert 'scratch' not in article.api.json()


def test_json_includes_explicit_none():
    article = Article({'title': 'Hello'})
    article.views = None
    assert article.api.json() == {'title': 'Hello', 'views': None}


def test_update_from_json_is_all_or_nothing():
    article = Article({'title': 'Before', 'views': 1})

    with pytest.raises(XResourceError):
        article.api.update_from_json({'title': 'After', 'views': 'abc'})

    assert article.title == 'Before'
    assert article.views == 1

    with pytest.raises(XResourceError):
        article.api.update_from_json(['title', 'After'])


def test_update_from_json_ignores_unknown_keys():
    article = Article({'title': 'Hello'})
    article.api.update_from_json({'views': 2, 'unknown': True, 'author': {'name': 'Bo'}})
    assert article.views == 2
    assert article.author_name == 'Bo'
    assert not hasattr(article, 'unknown')


def test_update_from_json_null_sets_none():
    article = Article({'title': 'Hello'})
    article.api.update_from_json({'title': None})
    assert article.title is None
    assert article.api.json() == {'title': None}


def test_default_value_called_if_callable_as_needed():
    class DefaultsModel(BaseModel):
        field_str: str = 2
        field_list: List[str] = list

    j = DefaultsModel()
    assert j.field_str == '2'
    assert j.field_list == []
    j_list = j.field_list

    j2 = DefaultsModel()

    assert j_list is not j2.field_list
    assert j2.field_list == []


def test_empty_json_dict_to_create_model():
    class DefaultModel(BaseModel):
        a_field: str = "default-value"

    obj = DefaultModel({})
    assert obj.a_field == "default-value"
    assert obj.api.json() == {'a_field': 'default-value'}


def test_identity_equality():
    a = Article({'title': 'Same'})
    b = Article({'title': 'Same'})
    assert a == a
    assert a != b
    assert len({a, b}) == 2


def test_class_api_has_no_model():
    with pytest.raises(XResourceError):
        Article.api.json()
