import dataclasses
from collections.abc import Mapping
from typing import Any, Dict, IO, Optional, Tuple, Union

FileContent = Union[bytes, IO[bytes]]
FileTuple = Tuple[Optional[str], FileContent, Optional[str]]


@dataclasses.dataclass
class FormData:
    """
    A multipart form payload, such as the one sent by `xresource.resources.photo.PhotoApi.upload`.

    >>> form = FormData()
    >>> form.add('caption', 'At the beach')
    >>> form.add_file('file', b'...', filename='beach.jpg', content_type='image/jpeg')

    `xresource.remote.transport.HttpxTransport` sends `FormData.fields` as the form data and
    `FormData.files` as the files of the request; the files are kept as httpx
    `(filename, content, content_type)` tuples.
    """

    fields: Dict[str, Any] = dataclasses.field(default_factory=dict)
    files: Dict[str, FileTuple] = dataclasses.field(default_factory=dict)

    def add(self, name: str, value: Any) -> "FormData":
        self.fields[name] = value
        return self

    def add_file(
            self,
            name: str,
            content: FileContent,
            filename: str = None,
            content_type: str = None
    ) -> "FormData":
        if filename is None:
            filename = getattr(content, 'name', None) or name
        self.files[name] = (filename, content, content_type)
        return self

    @classmethod
    def from_mapping(cls, values: Mapping) -> "FormData":
        """ Plain values become fields; bytes, file-like objects and tuples become files. """
        form = cls()
        for name, value in values.items():
            if isinstance(value, tuple):
                form.files[name] = value
            elif isinstance(value, (bytes, bytearray)) or hasattr(value, 'read'):
                form.add_file(name, value)
            else:
                form.add(name, value)
        return form
