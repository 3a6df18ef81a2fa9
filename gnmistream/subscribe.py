"""Core of the gNMI Subscribe service: ACLs, responses and statistics."""

from __future__ import annotations

import abc
import dataclasses
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional

from gnmistream.stats import ClientStats, StatsRegistry, TargetStats, TypeStats
from gnmistream.value import TypedValue

DEFAULT_TIMEOUT = 60.0


class SubscribeError(Exception):
    """An RPC failure carrying a status code name and a description."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __str__(self) -> str:
        return f"rpc error: code = {self.code} desc = {self.message}"


class RPCACL(abc.ABC):
    """Access control for one RPC."""

    @abc.abstractmethod
    def check(self, target: str) -> bool:
        """Report whether the RPC may see the target."""


class ACL(abc.ABC):
    """Server-wide access control."""

    @abc.abstractmethod
    def new_rpc_acl(self, context: Any) -> RPCACL:
        """Return the ACL of one RPC; raise when the caller is unknown."""

    @abc.abstractmethod
    def check(self, user: str, target: str) -> bool:
        """Report whether user may see target."""


class AllowAllACL(RPCACL):
    """An RPC ACL that permits every target and counts the checks made."""

    def __init__(self) -> None:
        self.checks = 0
        self._lock = threading.Lock()

    def check(self, target: str) -> bool:
        with self._lock:
            self.checks += 1
        return True


@dataclass
class Update:
    """A value at a path, with a count of coalesced duplicates."""

    path: Any = None
    val: Optional[TypedValue] = None
    duplicates: int = 0


@dataclass
class Notification:
    """A set of updates and deletes under a common prefix."""

    timestamp: int = 0
    prefix: Any = None
    update: List[Update] = field(default_factory=list)
    delete: List[Any] = field(default_factory=list)
    atomic: bool = False


@dataclass
class SubscribeResponse:
    """A response on the subscribe stream: a notification or a sync marker."""

    update: Optional[Notification] = None
    sync_response: bool = False


@dataclass
class ServerOptions:
    """Settings of a Server.

    A timeout of zero means the default of one minute. The hooks are called
    with the server's state already updated, for observing it in tests.
    """

    no_dup_report: bool = False
    timeout: float = DEFAULT_TIMEOUT
    stats: bool = False
    acl: Optional[ACL] = None
    client_stats_hook: Optional[Callable[[int, int], None]] = None
    subscription_enter_hook: Optional[Callable[[], None]] = None
    subscription_exit_hook: Optional[Callable[[], None]] = None

    def __post_init__(self) -> None:
        if not self.timeout:
            self.timeout = DEFAULT_TIMEOUT


class Server:
    """Serves subscriptions against a cache and keeps their statistics."""

    def __init__(self, cache: Any = None, options: Optional[ServerOptions] = None) -> None:
        self.cache = cache
        self.options = options if options is not None else ServerOptions()
        self._stats: Optional[StatsRegistry] = StatsRegistry() if self.options.stats else None

    def make_subscribe_response(self, notification: Any, dup: int) -> SubscribeResponse:
        """Wrap a notification in a response, reporting dup on its first update.

        The notification is shared between clients, so it is copied before a
        duplicate count is written; otherwise it is passed on unchanged.
        """
        if not isinstance(notification, Notification):
            raise SubscribeError("Internal", f"invalid notification type: {notification!r}")
        if not self.options.no_dup_report and dup > 0 and notification.update:
            first, *rest = notification.update
            notification = dataclasses.replace(
                notification,
                update=[dataclasses.replace(first, duplicates=dup), *rest],
            )
        return SubscribeResponse(update=notification)

    @contextmanager
    def track_target(self, target: str) -> Iterator[None]:
        """Count an active subscription to target for the duration of the block."""
        if self._stats is None:
            yield
            return
        st = self._stats.target_stats(target)
        with self._stats.lock:
            st.active_subscription_count += 1
            st.subscription_count += 1
        try:
            yield
        finally:
            with self._stats.lock:
                st.active_subscription_count -= 1
            if self.options.subscription_exit_hook is not None:
                self.options.subscription_exit_hook()

    @contextmanager
    def track_type(self, typ: str) -> Iterator[None]:
        """Count an active subscription of a mode (e.g. "stream") for the block."""
        if self._stats is None:
            yield
            return
        st = self._stats.type_stats(typ)
        with self._stats.lock:
            st.active_subscription_count += 1
            st.subscription_count += 1
        if self.options.subscription_enter_hook is not None:
            self.options.subscription_enter_hook()
        try:
            yield
        finally:
            with self._stats.lock:
                st.active_subscription_count -= 1

    def update_client_stats(self, client: str, target: str, dup: int, queue_size: int) -> None:
        """Add dup to a client's coalesce count and record its queue size."""
        if self._stats is None:
            return
        st = self._stats.client_stats(client, target)
        with self._stats.lock:
            st.coalesce_count += dup
            st.queue_size = queue_size
        if self.options.client_stats_hook is not None:
            self.options.client_stats_hook(dup, queue_size)

    def remove_client(self, client: str) -> None:
        """Drop the statistics of a client that has gone away."""
        if self._stats is not None:
            self._stats.remove_client_stats(client)

    def type_stats(self) -> Optional[Dict[str, TypeStats]]:
        """Statistics per subscription mode, or None when stats are off."""
        return None if self._stats is None else self._stats.all_type_stats()

    def target_stats(self) -> Optional[Dict[str, TargetStats]]:
        """Statistics per target, or None when stats are off."""
        return None if self._stats is None else self._stats.all_target_stats()

    def client_stats(self) -> Optional[Dict[str, ClientStats]]:
        """Statistics per client, or None when stats are off."""
        return None if self._stats is None else self._stats.all_client_stats()