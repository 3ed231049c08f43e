"""
Authorization gate: answers capability checks for an identity from its effective permission set.

Per identity the gate moves Unloaded -> Loading -> Loaded | Failed. Only Loaded can grant;
Failed denies everything until the retry delay passes or the entry is invalidated.
Loaded sets are refetched after the cache TTL, and a fetch that outlives the fetch timeout
is abandoned for a new one. Expired entries are evicted.
"""

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Protocol

from supabase import Client

from inventory.config import settings
from inventory.core.session import Identity, SessionContext

logger = logging.getLogger(__name__)


class PermissionFetchError(Exception):
    """The effective permission set for an identity could not be fetched."""


@dataclass(frozen=True)
class PermissionGrant:
    permission_name: str
    module: str = ""
    action: str = ""


@dataclass(frozen=True)
class PermissionDecision:
    granted: bool
    pending: bool


DENIED = PermissionDecision(granted=False, pending=False)
PENDING = PermissionDecision(granted=False, pending=True)


class GateState(str, Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


class PermissionQuery(Protocol):
    def fetch_effective_permissions(self, identity_id: str) -> List[PermissionGrant]:
        ...


class SupabasePermissionQuery:
    """Reads the already-unioned permission set for a user via the get_user_permissions RPC."""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def fetch_effective_permissions(self, identity_id: str) -> List[PermissionGrant]:
        try:
            result = self.supabase.rpc("get_user_permissions", {"_user_id": identity_id}).execute()
        except Exception as e:
            raise PermissionFetchError(f"Error fetching permissions for user {identity_id}: {e}") from e
        grants = []
        for row in result.data or []:
            name = row.get("permission_name")
            if not name:
                continue
            grants.append(PermissionGrant(
                permission_name=name,
                module=row.get("module") or "",
                action=row.get("action") or ""
            ))
        return grants


class _Entry:
    __slots__ = ("state", "permissions", "done", "started_at", "finished_at")

    def __init__(self, started_at: float):
        self.state = GateState.LOADING
        self.permissions: FrozenSet[str] = frozenset()
        self.done = threading.Event()
        self.started_at = started_at
        self.finished_at: Optional[float] = None


class AuthorizationGate:
    def __init__(
        self,
        permission_query: PermissionQuery,
        fetch_timeout: Optional[float] = None,
        cache_ttl: Optional[float] = None,
        retry_delay: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self._query = permission_query
        self._fetch_timeout = settings.permission_fetch_timeout if fetch_timeout is None else fetch_timeout
        self._cache_ttl = settings.permission_cache_ttl if cache_ttl is None else cache_ttl
        self._retry_delay = settings.permission_retry_delay if retry_delay is None else retry_delay
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[str, _Entry] = {}

    def has_permission(self, identity: Optional[Identity], permission_name: str, wait: bool = False) -> PermissionDecision:
        if not permission_name:
            raise ValueError("permission_name must be a non-empty string")
        return self._decide(identity, lambda granted: permission_name in granted, wait)

    def has_any_permission(self, identity: Optional[Identity], permission_names: Iterable[str], wait: bool = False) -> PermissionDecision:
        names = list(permission_names)
        if not names:
            return DENIED
        return self._decide(identity, lambda granted: any(name in granted for name in names), wait)

    def has_all_permissions(self, identity: Optional[Identity], permission_names: Iterable[str], wait: bool = False) -> PermissionDecision:
        names = list(permission_names)
        if not names:
            return PermissionDecision(granted=True, pending=False)
        return self._decide(identity, lambda granted: all(name in granted for name in names), wait)

    def effective_permissions(self, identity: Optional[Identity], wait: bool = True) -> FrozenSet[str]:
        if identity is None:
            return frozenset()
        entry = self._acquire(identity.id)
        if wait:
            entry.done.wait(self._fetch_timeout)
        if entry.state is GateState.LOADED:
            return entry.permissions
        return frozenset()

    def state(self, identity: Optional[Identity]) -> GateState:
        if identity is None:
            return GateState.UNLOADED
        with self._lock:
            entry = self._entries.get(identity.id)
        return entry.state if entry is not None else GateState.UNLOADED

    def invalidate(self, identity_id: Optional[str] = None) -> None:
        """Drop cached permissions for one identity, or for everyone when identity_id is None."""
        with self._lock:
            if identity_id is None:
                self._entries.clear()
            else:
                self._entries.pop(identity_id, None)
        logger.info(f"Permission cache invalidated for {identity_id or 'all users'}")

    def bind(self, session: SessionContext) -> Callable[[], None]:
        """Invalidate the previous identity's entry whenever the session's identity changes."""
        def on_change(previous: Optional[Identity], current: Optional[Identity]):
            if previous is not None:
                self.invalidate(previous.id)

        return session.on_identity_change(on_change)

    def _decide(
        self,
        identity: Optional[Identity],
        predicate: Callable[[FrozenSet[str]], bool],
        wait: bool
    ) -> PermissionDecision:
        if identity is None:
            return DENIED
        entry = self._acquire(identity.id)
        if wait and not entry.done.is_set():
            if not entry.done.wait(self._fetch_timeout):
                logger.warning(f"Timed out waiting for permissions of user {identity.id}; denying")
                return DENIED
        if entry.state is GateState.LOADING:
            return PENDING
        if entry.state is GateState.FAILED:
            return DENIED
        return PermissionDecision(granted=predicate(entry.permissions), pending=False)

    def _expired(self, entry: _Entry, now: float) -> bool:
        if entry.state is GateState.LOADING:
            return now - entry.started_at > self._fetch_timeout
        if entry.state is GateState.FAILED:
            return now - entry.finished_at >= self._retry_delay
        return now - entry.finished_at >= self._cache_ttl

    def _acquire(self, identity_id: str) -> _Entry:
        """
        Return the entry for identity_id, starting a single background fetch when there is none
        or the current one has expired (stale set, failed fetch past the retry delay, or a hung fetch).
        """
        with self._lock:
            now = self._clock()
            entry = self._entries.get(identity_id)
            if entry is not None and not self._expired(entry, now):
                return entry
            if entry is not None:
                logger.info(f"Refreshing {entry.state.value} permissions for user {identity_id}")
            # Expired entries are dropped, never mutated, so a late fetch cannot repopulate them
            for key in [k for k, e in self._entries.items() if self._expired(e, now)]:
                del self._entries[key]
            entry = _Entry(started_at=now)
            self._entries[identity_id] = entry
        thread = threading.Thread(
            target=self._load,
            args=(identity_id, entry),
            name=f"permissions-{identity_id}",
            daemon=True
        )
        thread.start()
        return entry

    def _load(self, identity_id: str, entry: _Entry) -> None:
        logger.debug(f"Fetching permissions for user {identity_id}")
        try:
            grants = self._query.fetch_effective_permissions(identity_id)
            entry.permissions = frozenset(grant.permission_name for grant in grants)
            entry.finished_at = self._clock()
            entry.state = GateState.LOADED
        except Exception as e:
            # Fail closed: a failed entry behaves like an empty permission set
            logger.error(f"Error getting user permissions: {e}")
            entry.permissions = frozenset()
            entry.finished_at = self._clock()
            entry.state = GateState.FAILED
        finally:
            entry.done.set()
