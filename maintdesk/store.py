# maintdesk/store.py
"""
Thin wrapper around the Supabase (PostgREST) client.

The hosted store owns ids, defaults and foreign keys; this module only issues
the three queries the app needs, each in a single round trip:

- equipment, embedding its category and team, ordered by name
- maintenance requests, embedding equipment -> category/team, newest first
- insert of one maintenance request row

Env vars:
- SUPABASE_URL
- SUPABASE_ANON_KEY
"""

import os
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from supabase import Client, create_client

from maintdesk import monitoring

SUPABASE_URL = os.getenv("SUPABASE_URL", "").strip()
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "").strip()

EQUIPMENT_TABLE = "equipment"
REQUESTS_TABLE = "maintenance_requests"

EQUIPMENT_COLUMNS = (
    "*, "
    "equipment_categories (id, name), "
    "maintenance_teams (id, name)"
)
REQUEST_COLUMNS = (
    "*, "
    "equipment (id, name, "
    "equipment_categories (id, name), "
    "maintenance_teams (id, name))"
)


class StoreError(RuntimeError):
    """Any failure reported by (or while reaching) the remote store."""

    def __init__(self, message: str, table: Optional[str] = None, operation: Optional[str] = None):
        super().__init__(message)
        self.table = table
        self.operation = operation


class LoadFailure(StoreError):
    pass


class SubmitFailure(StoreError):
    pass


@dataclass(frozen=True)
class NestedQuery:
    """A read-only select with embedded relations, issued as one request."""
    table: str
    columns: str
    order_by: str
    descending: bool = False

    def run(self, client: Client) -> List[Dict[str, Any]]:
        resp = (
            client.table(self.table)
            .select(self.columns)
            .order(self.order_by, desc=self.descending)
            .execute()
        )
        return list(resp.data or [])


EQUIPMENT_QUERY = NestedQuery(EQUIPMENT_TABLE, EQUIPMENT_COLUMNS, order_by="name")
REQUESTS_QUERY = NestedQuery(REQUESTS_TABLE, REQUEST_COLUMNS, order_by="created_at", descending=True)


class RemoteStore:
    def __init__(self, client: Optional[Client] = None,
                 url: Optional[str] = None, key: Optional[str] = None):
        self._client = client
        self.url = url or SUPABASE_URL
        self.key = key or SUPABASE_ANON_KEY

    def _get_client(self) -> Client:
        if self._client is None:
            if not self.url or not self.key:
                raise StoreError("SUPABASE_URL and SUPABASE_ANON_KEY must be set")
            self._client = create_client(self.url, self.key)
        return self._client

    # --- generic query-builder operations

    def select(self, query: NestedQuery) -> List[Dict[str, Any]]:
        start = time.time()
        try:
            rows = query.run(self._get_client())
        except Exception as e:
            monitoring.observe_store_query(start, query.table, "select", "error")
            raise LoadFailure(f"select from {query.table} failed: {e}",
                              table=query.table, operation="select") from e
        monitoring.observe_store_query(start, query.table, "select", "ok")
        return rows

    def insert(self, table: str, row: Dict[str, Any]) -> List[Dict[str, Any]]:
        start = time.time()
        try:
            resp = self._get_client().table(table).insert([row]).execute()
        except Exception as e:
            monitoring.observe_store_query(start, table, "insert", "error")
            raise SubmitFailure(f"insert into {table} failed: {e}",
                                table=table, operation="insert") from e
        monitoring.observe_store_query(start, table, "insert", "ok")
        return list(resp.data or [])

    # --- the queries the views issue

    def list_equipment(self) -> List[Dict[str, Any]]:
        return self.select(EQUIPMENT_QUERY)

    def list_requests(self) -> List[Dict[str, Any]]:
        return self.select(REQUESTS_QUERY)

    def insert_request(self, row: Dict[str, Any]) -> List[Dict[str, Any]]:
        return self.insert(REQUESTS_TABLE, row)
