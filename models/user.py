# models/user.py
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class Address(BaseModel):
    model_config = ConfigDict(frozen=True)

    country: str = ""
    city: str = ""
    street: str = ""
    number: str = ""


class User(BaseModel):
    """A user record as read from data.json and sent to the users API.

    Values are passed through opaquely; no email/date validation happens here.
    Missing keys default to empty values; wrong types are still rejected.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    email: str = ""
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    birth_date: str = Field(default="", alias="birthDate")
    address: Address = Field(default_factory=Address)
    phone: str = ""


_users_adapter = TypeAdapter(list[User])


def parse_users(raw: bytes | str) -> list[User]:
    """Parse a JSON array of users, keeping input order.

    Raises pydantic.ValidationError on invalid JSON or a wrong shape
    (e.g. a bare object instead of an array).
    """
    return _users_adapter.validate_json(raw)


def serialize_user(user: User) -> bytes:
    return user.model_dump_json(by_alias=True).encode("utf-8")
