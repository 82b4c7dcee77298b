import typing_inspect
from typing import Type, Union


def unwrap_optional_type(type_to_unwrap: Type) -> Type:
    """
    Returns the type inside an `Optional[...]` (ie: `Optional[int]` -> `int`).

    A union of several non-None types comes back as a union of just those types
    (ie: `int | str | None` -> `Union[int, str]`). If the type passed in is not a union,
    it's returned unaltered.
    """
    if not typing_inspect.is_union_type(type_to_unwrap):
        return type_to_unwrap

    sub_types = [t for t in typing_inspect.get_args(type_to_unwrap) if t is not type(None)]
    if len(sub_types) == 1:
        return sub_types[0]

    return Union[tuple(sub_types)]
