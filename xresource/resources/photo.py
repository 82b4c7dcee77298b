from typing import TypeVar, Self

from xresource.common.types import HttpMethod, Headers, TransformCallback
from xresource.remote import RemoteModel, RemoteApi
from xresource.remote.forms import FormData

M = TypeVar("M", bound=RemoteModel)


class PhotoApi(RemoteApi[M]):
    async def upload(
            self,
            form: FormData,
            *,
            url: str = None,
            headers: Headers = None,
            transform_response: TransformCallback = None,
            transform_request: TransformCallback = None,
    ) -> M:
        """ REQUIRES associated model object.

        POST a multipart `form` (ie: the image file) to `{base_url}/{id}/upload`,
        merging the response into the photo.

        >>> form = FormData().add_file('file', image_bytes, filename='sunset.jpg')
        >>> await photo.api.upload(form)

        Raises `xresource.errors.InvalidStateError` if the photo has no `id`.
        """
        self._require_id('upload')
        if url is None:
            url = self.member_url('upload')

        return await self.submit(
            HttpMethod.POST,
            url,
            form,
            {'Content-Type': 'multipart/form-data', **(headers or {})},
            transform_response=transform_response,
            transform_request=transform_request,
        )


class Photo(RemoteModel, base_url='/photos'):
    api: PhotoApi[Self]

    title: str
