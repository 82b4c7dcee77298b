from xresource.base.model import BaseModel
from xresource.base.api import BaseApi
from xresource.base.structure import BaseStructure
from xresource.base.fields import Field, Converter

__all__ = [
    "BaseModel",
    "BaseStructure",
    "BaseApi",
    "Field",
    "Converter",
]
