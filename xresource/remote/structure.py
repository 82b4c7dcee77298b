from typing import TypeVar, Optional, Type

from xresource.base.fields import Field
from xresource.base.structure import BaseStructure
from xresource.remote.options import ApiOptions

F = TypeVar('F', bound=Field)


class RemoteStructure(BaseStructure[F]):
    base_url: str = None
    """
    Path of the model's collection (ie: `/photos`), set via the `base_url` class argument:

    >>> class Photo(RemoteModel, base_url='/photos'):
    ...     title: str

    It's inherited from the parent model when not passed in. An instance can override it via
    `xresource.remote.api.RemoteApi.base_url` (the `url` init argument of the model).
    """

    api_options: ApiOptions = None
    """
    Set of default `xresource.remote.options.ApiOptions` for the model class.

    If the model class passes in an ApiOptions object as one of its class arguments, anything
    specifically set on that object overrides what the parent model's options have set.
    Any subclasses of that model will also inherit them.

    It's best to define these at class-definition time; if you change them dynamically
    later via `xresource.remote.api.RemoteApi.options`, subclasses that were already
    configured won't see the change.
    """

    def configure_for_model_type(
        self,
        *,
        base_url: str = None,
        api_options: ApiOptions = None,
        **kwargs
    ):
        """
        See `xresource.base.structure.BaseStructure.configure_for_model_type` for the basic
        arguments; the ones relevant to remote models are:

        Args:
            base_url: Collection path of the model (ie: `/users`), inherited if not given.
            api_options: Request options for the model class, see
                `xresource.remote.options.ApiOptions`.
        """
        super().configure_for_model_type(**kwargs)

        if base_url is not None:
            self.base_url = base_url

        if api_options is not None:
            # Anything api_options does not have set, but the parent does, gets copied over.
            api_options.set_unset_values(self.api_options)
            self.api_options = api_options

    def __init__(
        self,
        *,
        parent: Optional['RemoteStructure'],
        field_type: Type[F]
    ):
        super().__init__(parent=parent, field_type=field_type)

        options = ApiOptions()
        if parent:
            options.set_unset_values(parent.api_options)
        self.api_options = options

    def _include_in_default_data(self, field: F) -> bool:
        # A new model has no identity yet; `id` is only ever assigned by the service.
        return field.name != 'id' and super()._include_in_default_data(field)
