"""Unit tests for the FormSession buffer and payload building."""

import pytest

from mec_admin.application.schemas import BANNER_FORM, CLIENT_FORM, PROJECT_FORM, WORK_FORM
from mec_admin.application.services import FormSession, SessionMode
from mec_admin.domain.entities import Record
from mec_admin.domain.exceptions import SessionStateError, ValidationError


def _client_session() -> FormSession:
    session = FormSession(CLIENT_FORM)
    session.open()
    return session


# ── Opening ──


def test_open_create_applies_defaults_and_one_instance_per_group():
    session = FormSession(BANNER_FORM)
    session.open()

    assert session.mode == SessionMode.CREATE
    assert session.record_id is None
    assert session.scalar("is_active") is True
    assert session.asset(session.slot("img")) is None

    clients = _client_session()
    assert clients.group_values("companies") == [""]
    assert clients.group_values("client_emails") == [""]
    assert clients.group_values("client_phones") == [""]


def test_open_edit_flattens_companies_to_display_strings():
    record = Record.from_wire({
        "_id": "c1",
        "client_name": "Acme",
        "companies": [{"_id": "x1", "name": "Acme Inc"}, {"_id": "x2", "name": "Acme Labs"}],
        "client_emails": ["a@acme.com"],
        "client_phones": [],
    })
    session = FormSession(CLIENT_FORM)
    session.open(record)

    assert session.mode == SessionMode.EDIT
    assert session.record_id == "c1"
    assert session.group_values("companies") == ["Acme Inc", "Acme Labs"]
    # Empty groups are padded to their minimum size while editing.
    assert session.group_values("client_phones") == [""]

    payload = session.build_payload()
    assert payload["companies"] == [{"name": "Acme Inc"}, {"name": "Acme Labs"}]


def test_open_edit_flattens_populated_references_to_ids():
    record = Record.from_wire({
        "_id": "p1",
        "project_name": "Site",
        "short_description": "A site",
        "project_url": "https://example.com",
        "client_id": {"_id": "client-9", "client_name": "Acme"},
        "work_id": "work-3",
        "project_image": "https://cdn.test/p.png",
    })
    session = FormSession(PROJECT_FORM)
    session.open(record)

    assert session.scalar("client_id") == "client-9"
    assert session.scalar("work_id") == "work-3"


def test_edit_buffer_does_not_share_state_with_record():
    record = Record.from_wire({"_id": "w1", "title": "T", "info": [{"heading": "H", "details": "D", "img": ""}]})
    session = FormSession(WORK_FORM)
    session.open(record)

    session.set_group_field("info", 0, "heading", "Changed")
    assert record.fields["info"][0]["heading"] == "H"


# ── Groups ──


def test_remove_group_instance_keeps_relative_order():
    session = _client_session()
    session.set_group_field("companies", 0, "value", "A")
    for name in ("B", "C", "D"):
        index = session.add_group_instance("companies")
        session.set_group_field("companies", index, "value", name)

    removed = session.remove_group_instance("companies", 1)

    assert removed == {"value": "B"}
    assert session.group_values("companies") == ["A", "C", "D"]


def test_remove_last_required_instance_is_refused():
    session = _client_session()
    with pytest.raises(ValidationError):
        session.remove_group_instance("companies", 0)
    assert session.group_values("companies") == [""]


def test_work_info_blocks_may_be_removed_to_zero():
    session = FormSession(WORK_FORM)
    session.open()
    session.set_scalar("title", "Branding")
    session.remove_group_instance("info", 0)

    assert session.group("info") == []
    assert session.build_payload() == {"title": "Branding", "info": []}


def test_group_index_out_of_range():
    session = _client_session()
    with pytest.raises(IndexError):
        session.set_group_field("client_emails", 3, "value", "x@y.z")
    with pytest.raises(IndexError):
        session.remove_group_instance("client_emails", -1)


def test_asset_fields_cannot_be_set_directly():
    session = FormSession(WORK_FORM)
    session.open()
    with pytest.raises(ValueError):
        session.set_group_field("info", 0, "img", "https://cdn.test/x.png")


# ── Payload ──


def test_client_payload_drops_blank_contacts_and_nests_companies():
    session = _client_session()
    session.set_scalar("client_name", "Acme")
    session.set_group_field("companies", 0, "value", "Acme Inc")
    session.add_group_instance("client_emails")
    session.set_group_field("client_emails", 1, "value", "a@acme.com")

    payload = session.build_payload()

    assert payload == {
        "client_name": "Acme",
        "companies": [{"name": "Acme Inc"}],
        "client_emails": ["a@acme.com"],
        "client_phones": [],
    }


def test_blank_company_is_rejected():
    session = _client_session()
    session.set_scalar("client_name", "Acme")
    with pytest.raises(ValidationError) as exc_info:
        session.build_payload()
    assert exc_info.value.field == "companies[0].value"


def test_build_payload_is_idempotent():
    session = _client_session()
    session.set_scalar("client_name", "Acme")
    session.set_group_field("companies", 0, "value", "Acme Inc")

    first = session.build_payload()
    second = session.build_payload()

    assert first == second
    first["companies"].append({"name": "mutated"})
    assert session.build_payload() == second


def test_missing_required_scalar_is_rejected():
    session = FormSession(BANNER_FORM)
    session.open()
    session.set_scalar("description", "d")
    session.set_scalar("position", 1)
    with pytest.raises(ValidationError) as exc_info:
        session.build_payload()
    assert exc_info.value.field == "name"


def test_banner_without_image_is_rejected():
    record = Record.from_wire({
        "_id": "b1", "name": "Hero", "description": "d", "position": 1,
        "is_active": True, "img": "https://cdn.test/hero.png",
    })
    session = FormSession(BANNER_FORM)
    session.open(record)
    session.clear_asset(session.slot("img"))

    with pytest.raises(ValidationError) as exc_info:
        session.build_payload()
    assert exc_info.value.message == "Please upload an image first!"


def test_work_block_requires_heading_and_details_but_not_image():
    session = FormSession(WORK_FORM)
    session.open()
    session.set_scalar("title", "Branding")
    session.set_group_field("info", 0, "heading", "Logo")
    with pytest.raises(ValidationError):
        session.build_payload()

    session.set_group_field("info", 0, "details", "New logo")
    assert session.build_payload()["info"] == [{"heading": "Logo", "details": "New logo", "img": ""}]


# ── State machine ──


def test_failed_submit_returns_to_open_with_buffer():
    session = _client_session()
    session.set_scalar("client_name", "Acme")
    session.set_group_field("companies", 0, "value", "Acme Inc")

    payload = session.begin_submit()
    assert session.mode == SessionMode.SUBMITTING
    with pytest.raises(SessionStateError):
        session.set_scalar("client_name", "Other")

    session.fail_submit()
    assert session.mode == SessionMode.CREATE
    assert session.build_payload() == payload


def test_successful_submit_closes_session():
    session = _client_session()
    session.set_scalar("client_name", "Acme")
    session.set_group_field("companies", 0, "value", "Acme Inc")
    session.begin_submit()

    assert session.complete_submit() == []
    assert session.mode == SessionMode.CLOSED
    with pytest.raises(SessionStateError):
        session.build_payload()


def test_invalid_payload_keeps_session_open():
    session = _client_session()
    with pytest.raises(ValidationError):
        session.begin_submit()
    assert session.mode == SessionMode.CREATE


def test_mutations_require_an_open_session():
    session = FormSession(CLIENT_FORM)
    with pytest.raises(SessionStateError):
        session.set_scalar("client_name", "Acme")
    with pytest.raises(SessionStateError):
        session.add_group_instance("companies")
