from copy import copy
from typing import Any, Optional


class SetUnsetValues:
    def set_unset_values(self, parent: Optional['SetUnsetValues']):
        """
        Takes values that were DIRECTLY set on passed in parent and sets a copy of each value on
        self, as long as the same value has not been directly set on `self`
        [ie: self is still using the default value from its class].

        Used by `xresource.remote.options.ApiOptions` so a model subclass inherits any options
        explicitly set by its parent model, while still being able to override them.

        Args:
            parent: Object to copy directly-set values from, nothing happens if it's `None`.
        """
        if not parent:
            return

        for name, value in parent.__dict__.items():
            if name not in self.__dict__:
                setattr(self, name, copy(value))


def identity(value: Any) -> Any:
    return value
