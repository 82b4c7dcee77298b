class XResourceError(Exception):
    """ Base class for every error raised by xresource. """


class ValidationError(XResourceError):
    """
    Raised when an operation is not valid for the input it was given or for the current
    state of the model it's operating on (ie: an unknown HTTP method).
    """


class InvalidStateError(ValidationError):
    """
    Raised when an operation needs an identity the model does not have yet.

    Deleting, updating or uploading to a model requires `xresource.remote.model.RemoteModel.id`
    to be set, since those operations target the model's member url.
    """
