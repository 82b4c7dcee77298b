from typing import Any, Dict, List, Optional, Union

FieldErrors = Dict[str, List[Dict[str, Any]]]


class ResponseState:
    """
    What happened the last time a request was sent for a model object.

    Reached via `xresource.remote.api.RemoteApi.response_state`:

    >>> try:
    ...     await user.api.save()
    ... except RequestError:
    ...     if user.api.response_state.has_field_error('email', 'taken'):
    ...         ...
    """

    had_error: Optional[bool] = None
    """ `None` until a request for the object finishes; after that, whether it failed. """

    errors: Optional[List[Any]] = None
    """ Human readable messages the service (or the decoding of its response) gave for the
        failure. Can be `None` even when `ResponseState.had_error` is `True`.
    """

    field_errors: Optional[FieldErrors] = None
    """
    Errors per field name. Every entry is a dict holding at least a `code`, plus whatever else
    the service reported (ie: a `message`). Filled in by
    `xresource.remote.client.RemoteClient.parse_send_response_error`; query it with
    `ResponseState.has_field_error`.
    """

    response_code: Optional[int] = None
    """ Status of the last response, if there was one. """

    try_count: int = 0
    """ How many requests have been attempted for the object. """

    def mark_for_no_errors(self, response_code: int = None):
        """ Records a successful request; clears anything a previous failure left behind. """
        self.had_error = False
        self.errors = None
        self.field_errors = None
        if response_code is not None:
            self.response_code = response_code

    def mark_for_error(self, response_code: Optional[int], errors: List[Any] = None):
        self.had_error = True
        self.response_code = response_code
        self.errors = errors
        self.field_errors = None

    def add_field_error(
            self,
            field: str,
            code: Union[str, int],
            other: Dict[str, Any] = None
    ):
        """
        Records an error for `field`, which also marks the state as failed.

        Args:
            field: Name of the field the error is for.
            code: Machine readable kind of error (ie: `'taken'`); always wins over a
                `code` key inside `other`.
            other: Extra details to keep with the error, such as a `message`.
        """
        if self.field_errors is None:
            self.field_errors = {}

        entry = dict(other or {})
        entry['code'] = code
        self.field_errors.setdefault(field, []).append(entry)
        self.had_error = True

    def has_field_error(self, field: str, code: Union[str, int]) -> bool:
        """ `True` if the last request failed with an error of `code` for `field`. """
        if not self.had_error or not self.field_errors:
            return False

        return any(
            isinstance(entry, dict) and entry.get('code') == code
            for entry in self.field_errors.get(field) or ()
        )
