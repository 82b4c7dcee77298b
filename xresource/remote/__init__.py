from .model import RemoteModel
from .api import RemoteApi
from .structure import RemoteStructure
from .client import RemoteClient
from .options import ApiOptions
from .response_state import ResponseState
from .forms import FormData
from .transport import (
    Transport, TransportResponse, HttpxTransport, DefaultTransport, get_default_transport,
    set_default_transport
)
from .errors import XRemoteError, RequestError, XRemoteMaintenanceError, TransformError
