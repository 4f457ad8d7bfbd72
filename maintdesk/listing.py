# maintdesk/listing.py
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import List, Optional, Union

from pydantic import ValidationError

from maintdesk import monitoring
from maintdesk.models import MaintenanceRequest, Priority, RequestStatus, RequestType
from maintdesk.navigation import Navigator, View
from maintdesk.store import RemoteStore, StoreError

NEUTRAL_BADGE = "bg-gray-100 text-gray-800 border-gray-200"

PRIORITY_BADGES = {
    Priority.HIGH.value: "bg-red-100 text-red-800 border-red-200",
    Priority.MEDIUM.value: "bg-yellow-100 text-yellow-800 border-yellow-200",
    Priority.LOW.value: "bg-green-100 text-green-800 border-green-200",
}

STATUS_BADGES = {
    RequestStatus.NEW.value: "bg-blue-100 text-blue-800 border-blue-200",
    RequestStatus.IN_PROGRESS.value: "bg-yellow-100 text-yellow-800 border-yellow-200",
    RequestStatus.COMPLETED.value: "bg-green-100 text-green-800 border-green-200",
}

REQUEST_TYPE_LABELS = {
    RequestType.CORRECTIVE.value: "Corrective",
    RequestType.PREVENTIVE.value: "Preventive",
}

UNKNOWN_EQUIPMENT = "Unknown Equipment"


def priority_badge_class(priority: Optional[str]) -> str:
    return PRIORITY_BADGES.get(priority or "", NEUTRAL_BADGE)


def status_badge_class(status: Optional[str]) -> str:
    return STATUS_BADGES.get(status or "", NEUTRAL_BADGE)


def status_label(status: str) -> str:
    return status.replace("_", " ").upper()


def request_type_label(request_type: str) -> str:
    # anything that isn't corrective reads as preventive
    if request_type == RequestType.CORRECTIVE.value:
        return REQUEST_TYPE_LABELS[request_type]
    return REQUEST_TYPE_LABELS[RequestType.PREVENTIVE.value]


def format_date(value: Union[date, datetime]) -> str:
    """en-US short date, e.g. 'Jan 5, 2025'."""
    return f"{value:%b} {value.day}, {value.year}"


def _created_key(req: MaintenanceRequest) -> datetime:
    created = req.created_at
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return created


def newest_first(requests: List[MaintenanceRequest]) -> List[MaintenanceRequest]:
    return sorted(requests, key=_created_key, reverse=True)


@dataclass
class RequestCard:
    """Display strings for one request."""
    id: str
    title: str
    equipment_name: str
    category_name: Optional[str]
    status_label: str
    status_class: str
    priority_label: str
    priority_class: str
    scheduled: str
    created: str
    request_type: str
    description: str
    team_name: Optional[str]

    @classmethod
    def from_request(cls, req: MaintenanceRequest) -> "RequestCard":
        eq = req.equipment
        return cls(
            id=req.id,
            title=req.title,
            equipment_name=(eq.name if eq and eq.name else UNKNOWN_EQUIPMENT),
            category_name=(eq.category.name if eq and eq.category else None),
            status_label=status_label(req.status),
            status_class=status_badge_class(req.status),
            priority_label=req.priority.upper(),
            priority_class=priority_badge_class(req.priority),
            scheduled=format_date(req.scheduled_date),
            created=format_date(req.created_at),
            request_type=request_type_label(req.request_type),
            description=req.description,
            team_name=(eq.team.name if eq and eq.team else None),
        )


class RequestList:
    def __init__(self, store: RemoteStore):
        self.store = store
        self.navigator = Navigator(View.REQUESTS)
        self.requests: List[MaintenanceRequest] = []
        self.loading = True

    def load(self) -> List[MaintenanceRequest]:
        """Fetch every request newest-first. Failures log and leave the list empty."""
        self.loading = True
        try:
            rows = self.store.list_requests()
            requests = [MaintenanceRequest.model_validate(r) for r in rows]
        except (StoreError, ValidationError) as e:
            monitoring.logger.error("Error loading requests", extra={"error": str(e)})
            requests = []
        self.requests = newest_first(requests)
        self.loading = False
        monitoring.set_last_listed_requests(len(self.requests))
        return self.requests

    @property
    def is_empty(self) -> bool:
        return not self.loading and not self.requests

    def cards(self) -> List[RequestCard]:
        return [RequestCard.from_request(r) for r in self.requests]

    @property
    def next_view(self) -> Navigator:
        return self.navigator.to_form()
