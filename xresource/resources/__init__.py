from .photo import Photo, PhotoApi
from .user import User

__all__ = ["Photo", "PhotoApi", "User"]
