import json

import pytest
from pydantic import ValidationError

from models.user import Address, User, parse_users, serialize_user


def test_parse_users_keeps_order_and_fields(user_records):
    users = parse_users(json.dumps(user_records))

    assert [u.email for u in users] == ["a@x.com", "b@x.com", "c@x.com"]
    first = users[0]
    assert first.first_name == "Ann"
    assert first.last_name == "Lee"
    assert first.birth_date == "1990-01-01"
    assert first.address == Address(country="US", city="NYC", street="Main", number="1")
    assert first.phone == "555-0001"


def test_serialize_uses_json_field_names(user_records):
    user = parse_users(json.dumps(user_records[:1]))[0]

    payload = json.loads(serialize_user(user))

    assert payload == user_records[0]


def test_serialize_then_parse_gives_equal_user(user_records):
    user = User.model_validate(user_records[1])

    again = User.model_validate_json(serialize_user(user))

    assert again == user


def test_birth_date_is_not_validated():
    user = User.model_validate({
        "email": "not-an-email",
        "firstName": "",
        "lastName": "",
        "birthDate": "someday",
        "address": {"country": "", "city": "", "street": "", "number": ""},
        "phone": "",
    })
    assert user.birth_date == "someday"


@pytest.mark.parametrize(
    "raw",
    [
        '{"email": "a@x.com"}',  # bare object instead of array
        "[{",  # invalid JSON
        "[1, 2]",
        '[{"email": 5}]',  # wrong field type
        '[{"address": "Main 1"}]',
    ],
)
def test_parse_users_rejects_wrong_shape(raw):
    with pytest.raises(ValidationError):
        parse_users(raw)


def test_empty_array_parses_to_empty_list():
    assert parse_users("[]") == []


def test_user_is_immutable(user_records):
    user = User.model_validate(user_records[0])
    with pytest.raises(ValidationError):
        user.email = "other@x.com"


def test_missing_fields_default_to_empty_strings():
    users = parse_users('[{"email": "a@x.com"}]')

    assert len(users) == 1
    payload = json.loads(serialize_user(users[0]))
    assert payload == {
        "email": "a@x.com",
        "firstName": "",
        "lastName": "",
        "birthDate": "",
        "address": {"country": "", "city": "", "street": "", "number": ""},
        "phone": "",
    }


def test_missing_address_field_defaults_to_empty(user_records):
    record = dict(user_records[0], address={"country": "US"})

    user = parse_users(json.dumps([record]))[0]

    assert user.address == Address(country="US", city="", street="", number="")
