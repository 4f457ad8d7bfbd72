# tests/conftest.py
"""
Shared fixtures: an in-memory stand-in for the supabase client's query
builder, wired into a RemoteStore, and a TestClient using that store.
"""
import copy
from typing import Any, Dict, List, Optional, Set, Tuple

import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

from maintdesk import app as app_module
from maintdesk.store import RemoteStore


CATEGORY_PUMPS = {"id": "cat-1", "name": "Pumps"}
CATEGORY_HVAC = {"id": "cat-2", "name": "HVAC"}
TEAM_MECH = {"id": "team-1", "name": "Mechanical"}
TEAM_ELEC = {"id": "team-2", "name": "Electrical"}

EQUIPMENT_ROWS = [
    {
        "id": "eq-1",
        "name": "Boiler Feed Pump",
        "category_id": "cat-1",
        "team_id": "team-1",
        "created_at": "2025-01-01T08:00:00+00:00",
        "equipment_categories": CATEGORY_PUMPS,
        "maintenance_teams": TEAM_MECH,
    },
    {
        "id": "eq-2",
        "name": "Rooftop AC Unit",
        "category_id": "cat-2",
        "team_id": "team-2",
        "created_at": "2025-01-02T08:00:00+00:00",
        "equipment_categories": CATEGORY_HVAC,
        "maintenance_teams": TEAM_ELEC,
    },
    {
        "id": "eq-3",
        "name": "Spare Compressor",
        "category_id": None,
        "team_id": None,
        "created_at": "2025-01-03T08:00:00+00:00",
        "equipment_categories": None,
        "maintenance_teams": None,
    },
]


def _embedded(eq: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": eq["id"],
        "name": eq["name"],
        "equipment_categories": eq["equipment_categories"],
        "maintenance_teams": eq["maintenance_teams"],
    }


# deliberately not in created_at order
REQUEST_ROWS = [
    {
        "id": "req-2",
        "title": "AC blowing warm air",
        "equipment_id": "eq-2",
        "request_type": "corrective",
        "scheduled_date": "2025-02-10",
        "priority": "high",
        "description": "Compressor cycles but no cooling.",
        "attachment_url": None,
        "status": "in_progress",
        "created_at": "2025-02-01T09:30:00+00:00",
        "equipment": _embedded(EQUIPMENT_ROWS[1]),
    },
    {
        "id": "req-3",
        "title": "Quarterly pump service",
        "equipment_id": "eq-1",
        "request_type": "preventive",
        "scheduled_date": "2025-03-01",
        "priority": "low",
        "description": "Routine seal and bearing check.",
        "attachment_url": "https://example.com/pump.jpg",
        "status": "new",
        "created_at": "2025-02-15T14:00:00+00:00",
        "equipment": _embedded(EQUIPMENT_ROWS[0]),
    },
    {
        "id": "req-1",
        "title": "Compressor noise",
        "equipment_id": "eq-3",
        "request_type": "corrective",
        "scheduled_date": "2025-01-20",
        "priority": "medium",
        "description": "Rattling at start-up.",
        "attachment_url": None,
        "status": "completed",
        "created_at": "2025-01-15T07:45:00+00:00",
        "equipment": _embedded(EQUIPMENT_ROWS[2]),
    },
]


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    def __init__(self, client: "FakeSupabase", table: str):
        self.client = client
        self.table = table
        self.operation: Optional[str] = None
        self.columns: Optional[str] = None
        self.order_by: Optional[Tuple[str, bool]] = None
        self.rows: Optional[List[Dict[str, Any]]] = None

    def select(self, columns: str = "*"):
        self.operation = "select"
        self.columns = columns
        return self

    def order(self, column: str, desc: bool = False):
        self.order_by = (column, desc)
        return self

    def insert(self, rows):
        self.operation = "insert"
        self.rows = rows
        return self

    def execute(self) -> FakeResponse:
        self.client.executed.append(self)
        if (self.table, self.operation) in self.client.failures:
            raise APIError({"message": "simulated store outage", "code": "503"})
        if self.operation == "insert":
            created = []
            for row in self.rows:
                self.client.counter += 1
                stored = dict(row, id=f"new-{self.client.counter}",
                              created_at="2025-03-01T12:00:00+00:00")
                self.client.tables.setdefault(self.table, []).append(stored)
                created.append(stored)
            return FakeResponse(created)
        # rows come back as stored; ordering is left to the caller
        return FakeResponse(copy.deepcopy(self.client.tables.get(self.table, [])))


class FakeSupabase:
    def __init__(self, tables: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self.tables = copy.deepcopy(tables) if tables else {}
        self.executed: List[FakeQuery] = []
        self.failures: Set[Tuple[str, str]] = set()
        self.counter = 0

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def fail(self, table: str, operation: str):
        self.failures.add((table, operation))

    def calls(self, operation: str) -> List[FakeQuery]:
        return [q for q in self.executed if q.operation == operation]


@pytest.fixture
def fake_client():
    return FakeSupabase({
        "equipment": EQUIPMENT_ROWS,
        "maintenance_requests": REQUEST_ROWS,
    })


@pytest.fixture
def store(fake_client):
    return RemoteStore(client=fake_client)


@pytest.fixture
def client(monkeypatch, store):
    monkeypatch.setattr(app_module, "store", store)
    return TestClient(app_module.app)


@pytest.fixture
def valid_fields():
    return {
        "title": "Pump leaking",
        "equipment_id": "eq-1",
        "request_type": "corrective",
        "scheduled_date": "2025-04-01",
        "priority": "high",
        "description": "Water pooling under the pump housing.",
        "attachment_url": "",
    }
