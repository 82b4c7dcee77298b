import json

import httpx
import pytest

from xresource import HttpMethod, RequestError
from xresource.remote import FormData, HttpxTransport, XRemoteMaintenanceError
from xresource.remote.transport import DefaultTransport, set_default_transport
from xresource.resources import Photo


def make_transport(handler) -> HttpxTransport:
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url='https://api.test'
    )
    return HttpxTransport(client=client)


@pytest.mark.asyncio
async def test_json_request_and_response():
    def handler(request: httpx.Request):
        assert request.method == 'POST'
        assert str(request.url) == 'https://api.test/photos'
        assert request.headers['accept'] == 'application/json'
        assert json.loads(request.content) == {'title': 'Sunset'}
        return httpx.Response(201, json={'id': 1, 'title': 'Sunset'})

    transport = make_transport(handler)
    response = await transport.request(
        HttpMethod.POST,
        '/photos',
        body={'title': 'Sunset'},
        headers={'Accept': 'application/json', 'Content-Type': 'application/json'},
    )

    assert response.status == 201
    assert response.body == {'id': 1, 'title': 'Sunset'}
    assert response.headers['content-type'] == 'application/json'


@pytest.mark.asyncio
async def test_multipart_request():
    def handler(request: httpx.Request):
        content_type = request.headers['content-type']
        assert content_type.startswith('multipart/form-data; boundary=')
        assert b'name="caption"' in request.content
        assert b'filename="sunset.jpg"' in request.content
        assert b'JPEGDATA' in request.content
        return httpx.Response(200, json={})

    form = FormData().add('caption', 'At the beach')
    form.add_file('file', b'JPEGDATA', filename='sunset.jpg', content_type='image/jpeg')

    transport = make_transport(handler)
    response = await transport.request(
        'post', '/photos/1/upload', body=form, headers={'Content-Type': 'multipart/form-data'}
    )
    assert response.body == {}


@pytest.mark.asyncio
async def test_multipart_request_from_mapping():
    def handler(request: httpx.Request):
        assert request.headers['content-type'].startswith('multipart/form-data; boundary=')
        assert b'RAW' in request.content
        return httpx.Response(204)

    transport = make_transport(handler)
    response = await transport.request(
        HttpMethod.POST,
        '/photos/1/upload',
        body={'title': 'x', 'file': b'RAW'},
        headers={'Content-Type': 'multipart/form-data'},
    )
    assert response.status == 204
    assert response.body is None


@pytest.mark.asyncio
async def test_other_bodies():
    seen = []

    def handler(request: httpx.Request):
        seen.append((request.headers.get('content-type'), request.content))
        return httpx.Response(200, text='ok')

    transport = make_transport(handler)

    response = await transport.request(
        HttpMethod.POST,
        '/forms',
        body={'a': '1'},
        headers={'Content-Type': 'application/x-www-form-urlencoded'},
    )
    assert response.body == 'ok'

    await transport.request(
        HttpMethod.PUT, '/raw', body=b'raw-bytes', headers={'Content-Type': 'text/plain'}
    )

    assert seen == [
        ('application/x-www-form-urlencoded', b'a=1'),
        ('text/plain', b'raw-bytes'),
    ]


@pytest.mark.asyncio
async def test_error_responses():
    def handler(request: httpx.Request):
        if request.url.path == '/down':
            return httpx.Response(503, text='maintenance')
        return httpx.Response(422, json={'errors': {'title': ['is required']}})

    transport = make_transport(handler)

    with pytest.raises(RequestError) as error_info:
        await transport.request(HttpMethod.POST, '/photos', body={})

    error = error_info.value
    assert error.status == 422
    assert error.body == {'errors': {'title': ['is required']}}
    assert error.method == 'POST'
    assert error.url == '/photos'

    with pytest.raises(XRemoteMaintenanceError) as error_info:
        await transport.request(HttpMethod.GET, '/down')
    assert error_info.value.status == 503
    assert error_info.value.body == 'maintenance'


@pytest.mark.asyncio
async def test_connection_error():
    def handler(request: httpx.Request):
        raise httpx.ConnectError("connection refused", request=request)

    transport = make_transport(handler)
    with pytest.raises(RequestError) as error_info:
        await transport.request(HttpMethod.GET, '/photos')

    assert error_info.value.status is None
    assert isinstance(error_info.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_client_ownership():
    async with HttpxTransport('https://api.test') as transport:
        client = transport.client
        assert not client.is_closed
    assert client.is_closed

    shared = httpx.AsyncClient()
    transport = HttpxTransport(client=shared)
    await transport.aclose()
    assert not shared.is_closed
    await shared.aclose()


def test_base_url_from_environment(monkeypatch):
    monkeypatch.setenv('XRESOURCE_BASE_URL', 'https://env.test')
    transport = HttpxTransport()
    assert transport.base_url == 'https://env.test'


@pytest.mark.asyncio
async def test_model_over_httpx():
    def handler(request: httpx.Request):
        assert str(request.url) == 'https://api.test/photos/3'
        return httpx.Response(200, json={'id': 3, 'title': 'Dunes'})

    transport = make_transport(handler)
    try:
        with DefaultTransport(transport):
            photo = await Photo.api.find(3)
    finally:
        await transport.client.aclose()

    assert photo.title == 'Dunes'
    assert photo.api.response_state.response_code == 200


@pytest.mark.asyncio
async def test_default_transport_created_lazily_and_closed():
    default = DefaultTransport()
    created = default.transport

    assert isinstance(created, HttpxTransport)
    assert default.transport is created
    assert not created.client.is_closed

    await default.aclose()
    assert created.client.is_closed

    # A new one is created the next time it's needed.
    assert default.transport is not created
    await default.aclose()


@pytest.mark.asyncio
async def test_default_transport_leaves_given_transport_open():
    given = make_transport(lambda request: httpx.Response(204))
    default = DefaultTransport(given)

    assert default.transport is given
    await default.aclose()
    assert not given.client.is_closed
    await given.client.aclose()


def test_set_default_transport_returns_previous():
    first = make_transport(lambda request: httpx.Response(204))
    second = make_transport(lambda request: httpx.Response(204))

    assert set_default_transport(first) is None
    assert set_default_transport(second) is first
    assert DefaultTransport.grab().transport is second
