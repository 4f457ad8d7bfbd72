# tests/test_request_form.py
import logging
from dataclasses import asdict
from itertools import combinations

import pytest

from maintdesk.forms import (
    FormData,
    INVALID_DATE_MESSAGE,
    REQUIRED_MESSAGES,
    SUBMIT_FAILED_MESSAGE,
    RequestForm,
)
from maintdesk.navigation import View

REQUIRED = ("title", "equipment_id", "scheduled_date", "description")


def make_form(store, fields=None):
    form = RequestForm(store, success_delay=0)
    form.load_equipment()
    if fields:
        form.update(fields)
    return form


def test_load_equipment_parses_embedded_relations(store):
    form = make_form(store)
    names = [e.name for e in form.equipment]
    assert names == ["Boiler Feed Pump", "Rooftop AC Unit", "Spare Compressor"]
    assert form.equipment[0].category.name == "Pumps"
    assert form.equipment[0].team.name == "Mechanical"
    assert form.equipment[2].category is None


def test_load_failure_leaves_equipment_empty_and_logs(store, fake_client, caplog):
    fake_client.fail("equipment", "select")
    with caplog.at_level(logging.ERROR, logger="maintdesk"):
        form = make_form(store)
    assert form.equipment == []
    assert "Error loading equipment" in caplog.text


@pytest.mark.parametrize("blank", [
    combo for n in range(1, len(REQUIRED) + 1) for combo in combinations(REQUIRED, n)
])
def test_blank_required_fields_are_rejected_without_network(store, fake_client, valid_fields, blank):
    fields = dict(valid_fields)
    for name in blank:
        fields[name] = "   " if name in ("title", "description") else ""
    form = make_form(store, fields)

    assert form.submit() is False
    assert set(form.errors) == set(blank)
    for name in blank:
        assert form.errors[name] == REQUIRED_MESSAGES[name]
    assert fake_client.calls("insert") == []
    assert form.show_success is False


def test_valid_submit_inserts_once_with_status_new(store, fake_client, valid_fields):
    fields = dict(valid_fields, status="completed")
    form = make_form(store, fields)

    assert form.submit() is True
    inserts = fake_client.calls("insert")
    assert len(inserts) == 1
    row = inserts[0].rows[0]
    assert row["status"] == "new"
    assert row == {
        "title": "Pump leaking",
        "equipment_id": "eq-1",
        "request_type": "corrective",
        "scheduled_date": "2025-04-01",
        "priority": "high",
        "description": "Water pooling under the pump housing.",
        "attachment_url": None,
        "status": "new",
    }
    assert form.show_success is True
    assert form.created["id"].startswith("new-")
    assert form.next_view.view is View.REQUESTS


def test_empty_attachment_url_is_sent_as_null(store, valid_fields):
    form = make_form(store, dict(valid_fields, attachment_url="  "))
    assert form.build_insert_row()["attachment_url"] is None

    form = make_form(store, dict(valid_fields, attachment_url="https://example.com/a.png"))
    assert form.build_insert_row()["attachment_url"] == "https://example.com/a.png"


def test_submit_failure_sets_alert_and_keeps_values(store, fake_client, valid_fields, caplog):
    fake_client.fail("maintenance_requests", "insert")
    form = make_form(store, valid_fields)

    with caplog.at_level(logging.ERROR, logger="maintdesk"):
        assert form.submit() is False
    assert form.alert == SUBMIT_FAILED_MESSAGE
    assert form.errors == {}
    assert form.is_submitting is False
    assert form.show_success is False
    assert form.data.title == "Pump leaking"
    assert "Error submitting request" in caplog.text

    # retry once the store is back
    fake_client.failures.clear()
    assert form.submit() is True
    assert form.alert is None


def test_reset_restores_defaults_and_clears_errors(store, valid_fields):
    form = make_form(store, {"title": "half typed", "equipment_id": "eq-2", "priority": "low"})
    form.submit()
    assert form.errors
    assert form.selected_equipment is not None

    form.reset()
    assert asdict(form.data) == asdict(FormData())
    assert form.data.request_type == "corrective"
    assert form.data.priority == "medium"
    assert form.errors == {}
    assert form.selected_equipment is None


def test_selecting_equipment_clears_its_error(store):
    form = make_form(store)
    form.submit()
    assert "equipment_id" in form.errors

    selected = form.select_equipment("eq-2")
    assert selected.name == "Rooftop AC Unit"
    assert "equipment_id" not in form.errors
    assert form.data.equipment_id == "eq-2"


def test_unparseable_date_is_rejected(store, fake_client, valid_fields):
    form = make_form(store, dict(valid_fields, scheduled_date="04/01/2025"))
    assert form.submit() is False
    assert form.errors == {"scheduled_date": INVALID_DATE_MESSAGE}
    assert fake_client.calls("insert") == []


def test_unknown_priority_and_type_are_rejected(store, valid_fields):
    form = make_form(store, dict(valid_fields, priority="urgent", request_type="cosmetic"))
    assert form.submit() is False
    assert set(form.errors) == {"priority", "request_type"}


def test_second_submit_while_in_flight_is_ignored(store, fake_client, valid_fields):
    form = make_form(store, valid_fields)
    form.is_submitting = True
    assert form.submit() is False
    assert fake_client.calls("insert") == []


@pytest.mark.parametrize("value", ["2025-4-1", "2025-04-1", "25-04-01", "2025-02-30"])
def test_dates_the_insert_schema_would_refuse_are_field_errors(store, fake_client, valid_fields, value):
    form = make_form(store, dict(valid_fields, scheduled_date=value))
    assert form.submit() is False
    assert form.errors == {"scheduled_date": INVALID_DATE_MESSAGE}
    assert fake_client.calls("insert") == []
