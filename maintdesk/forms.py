# maintdesk/forms.py
"""
Request form state: field values, per-field errors, the equipment picker,
and the submit/reset actions.

A RequestForm is built per HTTP request. The app posts the browser's field
values into it with update(), then calls submit() or reset() and renders
whatever state results.
"""

import os
import json
import pathlib
import re
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from jsonschema import validate as jsonschema_validate
from pydantic import ValidationError

from maintdesk import monitoring
from maintdesk.models import Equipment, Priority, RequestStatus, RequestType
from maintdesk.navigation import Navigator, View
from maintdesk.store import RemoteStore, StoreError, SubmitFailure

SUCCESS_REDIRECT_SECONDS = float(os.getenv("SUCCESS_REDIRECT_SECONDS", "1.5"))

INSERT_SCHEMA_PATH = pathlib.Path(__file__).resolve().parent.joinpath(
    "schemas", "maintenance_request_insert.json"
)
with open(INSERT_SCHEMA_PATH, "r", encoding="utf-8") as f:
    INSERT_SCHEMA = json.load(f)

# same shape the insert schema enforces on scheduled_date
ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

REQUIRED_MESSAGES = {
    "title": "Title is required",
    "equipment_id": "Equipment selection is required",
    "scheduled_date": "Scheduled date is required",
    "description": "Description is required",
}
INVALID_DATE_MESSAGE = "Scheduled date must be a valid date"
INVALID_REQUEST_TYPE_MESSAGE = "Request type must be corrective or preventive"
INVALID_PRIORITY_MESSAGE = "Priority must be low, medium or high"
SUBMIT_FAILED_MESSAGE = "Failed to submit request. Please try again."


@dataclass
class FormData:
    title: str = ""
    equipment_id: str = ""
    request_type: str = RequestType.CORRECTIVE.value
    scheduled_date: str = ""
    priority: str = Priority.MEDIUM.value
    description: str = ""
    attachment_url: str = ""


FORM_FIELDS = tuple(f.name for f in fields(FormData))


class RequestForm:
    def __init__(self, store: RemoteStore, success_delay: float = SUCCESS_REDIRECT_SECONDS):
        self.store = store
        self.success_delay = success_delay
        self.navigator = Navigator(View.FORM)
        self.data = FormData()
        self.errors: Dict[str, str] = {}
        self.equipment: List[Equipment] = []
        self.selected_equipment: Optional[Equipment] = None
        self.is_submitting = False
        self.show_success = False
        self.alert: Optional[str] = None
        self.created: Optional[Dict[str, Any]] = None

    def load_equipment(self) -> List[Equipment]:
        """Fetch equipment with category/team. Failures leave the picker empty."""
        try:
            rows = self.store.list_equipment()
            self.equipment = [Equipment.model_validate(r) for r in rows]
        except (StoreError, ValidationError) as e:
            monitoring.logger.error("Error loading equipment", extra={"error": str(e)})
            self.equipment = []
        # the selection may refer to equipment that only now became known
        if self.data.equipment_id:
            self.selected_equipment = self._find_equipment(self.data.equipment_id)
        return self.equipment

    def _find_equipment(self, equipment_id: str) -> Optional[Equipment]:
        return next((e for e in self.equipment if e.id == equipment_id), None)

    def select_equipment(self, equipment_id: str) -> Optional[Equipment]:
        self.selected_equipment = self._find_equipment(equipment_id)
        self.data.equipment_id = equipment_id
        self.errors.pop("equipment_id", None)
        return self.selected_equipment

    def update(self, values: Mapping[str, Any]) -> None:
        """Copy known field values in. Unknown keys (e.g. status) are ignored."""
        for name in FORM_FIELDS:
            if name not in values:
                continue
            value = values[name]
            value = "" if value is None else str(value)
            if name == "equipment_id":
                self.select_equipment(value)
            else:
                setattr(self.data, name, value)

    def validate(self) -> bool:
        errors: Dict[str, str] = {}
        d = self.data

        if not d.title.strip():
            errors["title"] = REQUIRED_MESSAGES["title"]
        if not d.equipment_id:
            errors["equipment_id"] = REQUIRED_MESSAGES["equipment_id"]
        if not d.scheduled_date:
            errors["scheduled_date"] = REQUIRED_MESSAGES["scheduled_date"]
        else:
            try:
                if not ISO_DATE_RE.match(d.scheduled_date):
                    raise ValueError(d.scheduled_date)
                datetime.strptime(d.scheduled_date, "%Y-%m-%d")
            except ValueError:
                errors["scheduled_date"] = INVALID_DATE_MESSAGE
        if not d.description.strip():
            errors["description"] = REQUIRED_MESSAGES["description"]

        if d.request_type not in {t.value for t in RequestType}:
            errors["request_type"] = INVALID_REQUEST_TYPE_MESSAGE
        if d.priority not in {p.value for p in Priority}:
            errors["priority"] = INVALID_PRIORITY_MESSAGE

        for field in errors:
            monitoring.inc_validation_failure(field)
        self.errors = errors
        return not errors

    def build_insert_row(self) -> Dict[str, Any]:
        """Row sent to maintenance_requests. Status is always 'new'."""
        d = self.data
        row = {
            "title": d.title.strip(),
            "equipment_id": d.equipment_id,
            "request_type": d.request_type,
            "scheduled_date": d.scheduled_date,
            "priority": d.priority,
            "description": d.description.strip(),
            "attachment_url": d.attachment_url.strip() or None,
            "status": RequestStatus.NEW.value,
        }
        jsonschema_validate(instance=row, schema=INSERT_SCHEMA)
        return row

    def submit(self) -> bool:
        """
        Validate and insert. Returns True on success, after which show_success
        is set and next_view points back at the request list. On store failure
        the field values are kept and self.alert carries the message to show.

        While an insert is in flight, further submit() calls on the same
        instance return False without touching the store.
        """
        if self.is_submitting:
            return False
        self.alert = None
        if not self.validate():
            monitoring.inc_submission("invalid")
            return False

        row = self.build_insert_row()
        self.is_submitting = True
        try:
            inserted = self.store.insert_request(row)
        except SubmitFailure:
            monitoring.logger.exception("Error submitting request",
                                        extra={"equipment_id": row["equipment_id"]})
            monitoring.inc_submission("error")
            self.alert = SUBMIT_FAILED_MESSAGE
            return False
        finally:
            self.is_submitting = False

        monitoring.inc_submission("ok")
        self.created = inserted[0] if inserted else None
        self.show_success = True
        return True

    def reset(self) -> None:
        self.data = FormData()
        self.selected_equipment = None
        self.errors = {}
        self.alert = None

    @property
    def next_view(self) -> Navigator:
        return self.navigator.to_requests()
