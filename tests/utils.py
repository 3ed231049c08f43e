"""
In-memory stand-ins for the Supabase client used by the test-suite.

Only the query-builder surface the services call is implemented:
table().select/insert/update/delete, eq/in_/order/limit/offset, execute(), and rpc().
"""

from __future__ import annotations

import re
import threading
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from inventory.core.authorization import PermissionFetchError, PermissionGrant

# embedded resource -> (local key, key on the embedded table, one-to-many)
EMBEDS = {
    "materials": ("material_id", "id", False),
    "machines": ("machine_id", "id", False),
    "permissions": ("permission_id", "id", False),
    "user_roles": ("id", "user_id", True),
}


@dataclass
class FakeResult:
    data: Any


@dataclass
class _Query:
    store: "FakeSupabase"
    table: str
    action: str = "select"
    payload: Any = None
    filters: List[Callable[[dict], bool]] = field(default_factory=list)
    order_by: List[tuple] = field(default_factory=list)
    limit_n: Optional[int] = None
    offset_n: int = 0
    embeds: List[str] = field(default_factory=list)

    def select(self, columns="*"):
        self.action = "select"
        self.embeds = [name for name in re.findall(r"(\w+)\(", columns) if name in EMBEDS]
        return self

    def insert(self, payload):
        self.action = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.action = "update"
        self.payload = payload
        return self

    def delete(self):
        self.action = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def order(self, column, desc=False):
        self.order_by.append((column, desc))
        return self

    def limit(self, n):
        self.limit_n = n
        return self

    def offset(self, n):
        self.offset_n = n
        return self

    def _embed(self, row: dict) -> dict:
        for name in self.embeds:
            local_key, remote_key, many = EMBEDS[name]
            related = [dict(r) for r in self.store.tables.get(name, []) if r.get(remote_key) == row.get(local_key)]
            row[name] = related if many else (related[0] if related else None)
        return row

    def _matches(self, row: dict) -> bool:
        return all(check(row) for check in self.filters)

    def execute(self) -> FakeResult:
        if self.store.fail_tables and self.table in self.store.fail_tables:
            raise RuntimeError(f"table {self.table} unavailable")
        rows = self.store.tables.setdefault(self.table, [])

        if self.action == "insert":
            items = self.payload if isinstance(self.payload, list) else [self.payload]
            created = []
            for item in items:
                row = {"id": str(uuid.uuid4()), **item}
                rows.append(row)
                created.append(dict(row))
            return FakeResult(created)

        if self.action == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self.payload)
                    updated.append(dict(row))
            return FakeResult(updated)

        if self.action == "delete":
            removed = [row for row in rows if self._matches(row)]
            self.store.tables[self.table] = [row for row in rows if not self._matches(row)]
            return FakeResult([dict(row) for row in removed])

        selected = [self._embed(dict(row)) for row in rows if self._matches(row)]
        for column, desc in reversed(self.order_by):
            selected.sort(key=lambda row: (row.get(column) is None, row.get(column) or ""), reverse=desc)
        selected = selected[self.offset_n:]
        if self.limit_n is not None:
            selected = selected[:self.limit_n]
        return FakeResult(selected)


class _Rpc:
    def __init__(self, handler: Callable[[], Any]):
        self._handler = handler

    def execute(self) -> FakeResult:
        return FakeResult(self._handler())


class FakeSupabase:
    def __init__(self, tables: Optional[Dict[str, List[dict]]] = None):
        self.tables: Dict[str, List[dict]] = {name: list(rows) for name, rows in (tables or {}).items()}
        self.rpc_calls: List[tuple] = []
        self.fail_tables: set = set()

    def table(self, name: str) -> _Query:
        return _Query(store=self, table=name)

    def rpc(self, name: str, params: dict) -> _Rpc:
        self.rpc_calls.append((name, params))
        if name != "get_user_permissions":
            raise RuntimeError(f"unknown rpc {name}")
        return _Rpc(lambda: self.user_permissions(params["_user_id"]))

    def user_permissions(self, user_id: str) -> List[dict]:
        """Union of the permissions granted to every role the user holds."""
        roles = {row["role"] for row in self.tables.get("user_roles", []) if row.get("user_id") == user_id}
        permission_ids = {
            row["permission_id"] for row in self.tables.get("role_permissions", []) if row.get("role") in roles
        }
        return [
            {"permission_name": p["name"], "module": p.get("module"), "action": p.get("action")}
            for p in self.tables.get("permissions", [])
            if p["id"] in permission_ids
        ]


class StaticPermissionQuery:
    """Returns a fixed permission set per identity, counting fetches."""

    def __init__(self, grants: Dict[str, List[str]], fail_for: Optional[set] = None):
        self.grants = grants
        self.fail_for = fail_for or set()
        self.calls: List[str] = []
        self._lock = threading.Lock()

    def fetch_effective_permissions(self, identity_id: str) -> List[PermissionGrant]:
        with self._lock:
            self.calls.append(identity_id)
        if identity_id in self.fail_for:
            raise PermissionFetchError(f"backend unavailable for {identity_id}")
        return [PermissionGrant(permission_name=name) for name in self.grants.get(identity_id, [])]


class BlockingPermissionQuery(StaticPermissionQuery):
    """Holds every fetch until `release` is set, so tests can observe the loading state."""

    def __init__(self, grants: Dict[str, List[str]], fail_for: Optional[set] = None):
        super().__init__(grants, fail_for)
        self.started = threading.Event()
        self.release = threading.Event()

    def fetch_effective_permissions(self, identity_id: str) -> List[PermissionGrant]:
        self.started.set()
        self.release.wait(5)
        return super().fetch_effective_permissions(identity_id)


class StallFirstFetchQuery(StaticPermissionQuery):
    """The first fetch hangs until `release` is set; later fetches answer immediately."""

    def __init__(self, grants: Dict[str, List[str]], fail_for: Optional[set] = None):
        super().__init__(grants, fail_for)
        self.started = threading.Event()
        self.release = threading.Event()

    def fetch_effective_permissions(self, identity_id: str) -> List[PermissionGrant]:
        if not self.started.is_set():
            self.started.set()
            self.release.wait(5)
        return super().fetch_effective_permissions(identity_id)


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds
