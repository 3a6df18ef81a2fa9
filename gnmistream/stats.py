"""Client-side subscription statistics kept by a subscribe server."""

from __future__ import annotations

import dataclasses
import threading
from dataclasses import dataclass
from typing import Dict


@dataclass
class TypeStats:
    """Counts for one subscription mode, such as stream, once or poll."""

    active_subscription_count: int = 0
    subscription_count: int = 0


@dataclass
class TargetStats:
    """Counts of subscriptions made to one target."""

    active_subscription_count: int = 0
    subscription_count: int = 0


@dataclass
class ClientStats:
    """State of one subscribing client."""

    target: str = ""
    coalesce_count: int = 0
    queue_size: int = 0


class StatsRegistry:
    """Thread-safe store of per-type, per-target and per-client statistics.

    The entry accessors return live records; callers that change them do so
    while holding ``lock``. The ``all_*`` methods return snapshots.
    """

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self._types: Dict[str, TypeStats] = {}
        self._targets: Dict[str, TargetStats] = {}
        self._clients: Dict[str, ClientStats] = {}

    def all_type_stats(self) -> Dict[str, TypeStats]:
        """Return a copy of the statistics of every subscription type."""
        with self.lock:
            return {k: dataclasses.replace(v) for k, v in self._types.items()}

    def all_target_stats(self) -> Dict[str, TargetStats]:
        """Return a copy of the statistics of every target."""
        with self.lock:
            return {k: dataclasses.replace(v) for k, v in self._targets.items()}

    def all_client_stats(self) -> Dict[str, ClientStats]:
        """Return a copy of the statistics of every client."""
        with self.lock:
            return {k: dataclasses.replace(v) for k, v in self._clients.items()}

    def type_stats(self, typ: str) -> TypeStats:
        """Return the live record for a type, creating it if needed."""
        with self.lock:
            st = self._types.get(typ)
            if st is None:
                st = self._types[typ] = TypeStats()
            return st

    def target_stats(self, target: str) -> TargetStats:
        """Return the live record for a target, creating it if needed."""
        with self.lock:
            st = self._targets.get(target)
            if st is None:
                st = self._targets[target] = TargetStats()
            return st

    def client_stats(self, client: str, target: str) -> ClientStats:
        """Return the live record for a client, creating it for target if needed."""
        with self.lock:
            st = self._clients.get(client)
            if st is None:
                st = self._clients[client] = ClientStats(target=target)
            return st

    def remove_client_stats(self, client: str) -> None:
        """Forget a client; unknown clients are ignored."""
        with self.lock:
            self._clients.pop(client, None)