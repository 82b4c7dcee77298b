from xresource.remote import RemoteModel


class User(RemoteModel, base_url='/users'):
    name: str
    email: str
    password: str
    password_confirmation: str
