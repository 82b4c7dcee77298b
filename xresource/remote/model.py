from typing import TypeVar, TYPE_CHECKING, Any, Self

from xresource.base.model import BaseModel
from xresource.common.types import Query

if TYPE_CHECKING:
    from xresource.remote.api import RemoteApi

# Can't forward-ref the bound type here (ie: 'RemoteModel'), so put BaseModel in at least...
M = TypeVar("M", bound=BaseModel)


def _lazy_load_types(cls):
    """
    Lazy import RemoteApi into module, to resolve the `api: "RemoteApi[Self]"` forward-ref
    when `xresource.base.model.BaseModel.__init_subclass__` calls `get_type_hints()`.
    """
    if 'RemoteApi' not in globals():
        from xresource.remote.api import RemoteApi
        globals()['RemoteApi'] = RemoteApi


class RemoteModel(BaseModel, lazy_loader=_lazy_load_types):
    """
    A model for a resource on a REST service, which is identified by its `RemoteModel.id`.

    Subclasses are configured with class arguments:

    >>> class Photo(RemoteModel, base_url='/photos'):
    ...     title: str

    See `xresource.remote.api.RemoteApi` for sending/fetching them.
    """

    api: 'RemoteApi[Self]' = None

    id: int | str = None
    """ Primary identifier for object, used with API endpoint. `None` means it has not been
        created on the service yet.

        Integer and string ids (ie: `'a1b2c3'` or a UUID string) are kept as given;
        any other value is converted to an `int`.
    """

    def __init__(
            self,
            data: Any = None,
            params: Query = None,
            url: str = None,
            *,
            id: Any = None,
            **initial_values
    ):
        """
        Args:
            data: See `xresource.base.model.BaseModel.__init__`.
            params: Query params for the object; see `xresource.remote.api.RemoteApi.params`.
            url: Overrides the collection path of the model class for this object;
                see `xresource.remote.api.RemoteApi.base_url`.
            id: Initial `RemoteModel.id`.
            **initial_values: See `xresource.base.model.BaseModel.__init__`.
        """
        super().__init__(data, **initial_values)

        api = self.api
        if params is not None:
            api.params = dict(params)
        if url is not None:
            api.base_url = url
        if id is not None:
            self.id = id

    def __repr__(self):
        message = super().__repr__().split("(", 1)[1][:-1]

        response_state = self.api.response_state
        response_state_attrs = []

        if response_state.had_error is not None:
            response_state_attrs.append('had_error')

        if response_state.response_code is not None and response_state.response_code != 200:
            response_state_attrs.append('response_code')

        if response_state.errors is not None:
            response_state_attrs.append('errors')

        for attr in response_state_attrs:
            if message:
                message += ', '
            message += f'__{attr}={getattr(response_state, attr, None)}'

        return f"{self.__class__.__name__}({message})"
