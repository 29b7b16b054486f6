"""Tests for mapping Clerk payloads onto user records."""

import pytest

from sync_common.models.user import ClerkUserPayload
from sync_common.services.field_mapper import map_user_payload


@pytest.mark.unit
def test_maps_full_payload(alice_event) -> None:
    record = map_user_payload(ClerkUserPayload.model_validate(alice_event["data"]))

    assert record.to_document() == {
        "id": None,
        "clerkId": "u1",
        "email": "a@x.com",
        "username": "alice",
        "photo": "http://img/1",
        "firstName": "A",
        "lastName": "L",
    }


@pytest.mark.unit
def test_uses_first_email_only() -> None:
    payload = ClerkUserPayload(
        id="u2",
        email_addresses=[{"email_address": "first@x.com"}, {"email_address": "second@x.com"}],
    )

    assert map_user_payload(payload).email == "first@x.com"


@pytest.mark.unit
@pytest.mark.parametrize("email_addresses", [None, []])
def test_missing_emails_map_to_empty_string(email_addresses) -> None:
    payload = ClerkUserPayload(id="u3", email_addresses=email_addresses)

    assert map_user_payload(payload).email == ""


@pytest.mark.unit
def test_absent_optional_fields_become_empty_strings() -> None:
    payload = ClerkUserPayload.model_validate(
        {"id": "u4", "username": None, "image_url": None, "first_name": None, "object": "user"}
    )

    record = map_user_payload(payload)

    assert record.username == ""
    assert record.photo == ""
    assert record.first_name == ""
    assert record.last_name == ""
