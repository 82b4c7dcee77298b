from xresource import HttpMethod, ValidationError
from xresource.remote import ApiOptions, RemoteModel

import pytest


class ParentResource(RemoteModel, base_url='/parents', api_options=ApiOptions(
    update_method=HttpMethod.PATCH,
    headers={'Accept': 'application/vnd.api+json'},
)):
    name: str


class ChildResource(ParentResource, base_url='/children', api_options=ApiOptions(
    headers={'X-Child': 'yes'},
)):
    pass


class PlainResource(RemoteModel, base_url='/plain'):
    pass


def test_default_api_options():
    options = PlainResource.api.options
    assert options.update_method is HttpMethod.PUT
    assert options.headers == {
        'Accept': 'application/json',
        'Content-Type': 'application/json',
    }
    assert options.transform_request(5) == 5
    assert options.transform_response({'a': 1}) == {'a': 1}
    assert options.transport is None


def test_api_options_inherit_from_parent_model():
    assert ParentResource.api.options.update_method is HttpMethod.PATCH

    child_options = ChildResource.api.options
    assert child_options.update_method is HttpMethod.PATCH
    assert child_options.headers == {'X-Child': 'yes'}
    assert ChildResource.api.base_url == '/children'

    # Parent was not changed by the child.
    assert ParentResource.api.options.headers == {'Accept': 'application/vnd.api+json'}


def test_api_options_parse_method():
    assert ApiOptions(update_method='patch').update_method is HttpMethod.PATCH

    with pytest.raises(ValidationError):
        ApiOptions(update_method='FETCH')


def test_api_options_repr():
    assert "update_method='PATCH'" in repr(ParentResource.api.options)


def test_api_options_headers_not_shared_between_models():
    class UserResource(RemoteModel, base_url='/users'):
        pass

    class OtherPlainResource(RemoteModel, base_url='/other-plain'):
        pass

    UserResource.api.options.headers['Authorization'] = 'Bearer x'

    assert 'Authorization' not in OtherPlainResource.api.options.headers
    assert 'Authorization' not in ApiOptions().headers
    assert 'Authorization' not in ApiOptions.headers


def test_api_options_headers_inherited_as_copy():
    class GrandChildResource(ChildResource, base_url='/grand-children'):
        pass

    assert GrandChildResource.api.options.headers == {'X-Child': 'yes'}
    GrandChildResource.api.options.headers['X-Grand'] = '1'
    assert ChildResource.api.options.headers == {'X-Child': 'yes'}
