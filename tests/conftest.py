import dataclasses
from typing import Any, Dict, List, Union

import pytest

from xresource.common.types import HttpMethod
from xresource.remote.transport import DefaultTransport, Transport, TransportResponse


@dataclasses.dataclass
class RecordedRequest:
    method: HttpMethod
    url: str
    body: Any
    headers: Dict[str, str]


class RecordingTransport(Transport):
    """ Records every request, and answers with the queued responses (or raises the queued
        errors) in order. With nothing queued, it answers with an empty 204.
    """

    def __init__(self):
        self.requests: List[RecordedRequest] = []
        self.responses: List[Union[TransportResponse, Exception]] = []

    def respond(self, body: Any = None, status: int = 200, headers: Dict[str, str] = None):
        self.responses.append(TransportResponse(status=status, body=body, headers=headers or {}))

    def fail(self, error: Exception):
        self.responses.append(error)

    @property
    def last_request(self) -> RecordedRequest:
        return self.requests[-1]

    async def request(self, method, url, *, body=None, headers=None) -> TransportResponse:
        self.requests.append(RecordedRequest(method, url, body, dict(headers or {})))
        if not self.responses:
            return TransportResponse(status=204)

        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def transport() -> RecordingTransport:
    """ Made the default transport for the test; xinject gives every test a fresh context,
        so nothing needs to be put back afterwards.
    """
    recording = RecordingTransport()
    DefaultTransport.grab().transport = recording
    return recording
