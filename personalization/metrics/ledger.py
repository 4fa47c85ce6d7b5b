"""
Interaction Ledger - Source of interaction events.

The engine reads ledgers; production ledgers live in the analytics pipeline
and only need to implement InteractionLedger.
"""
import threading
from abc import ABC, abstractmethod
from typing import List, Optional

from personalization.metrics.models import InteractionEvent


class InteractionLedger(ABC):
    """Append-only event log keyed by item id."""

    @abstractmethod
    def append(self, event: InteractionEvent) -> None:
        pass

    @abstractmethod
    def events(self, item_id: Optional[str] = None) -> List[InteractionEvent]:
        """Events in append order, optionally filtered to one item."""
        pass


class InMemoryLedger(InteractionLedger):
    """In-process ledger for tests and single-node deployments."""

    def __init__(self, events: Optional[List[InteractionEvent]] = None):
        self._events: List[InteractionEvent] = list(events or [])
        self._lock = threading.Lock()

    def append(self, event: InteractionEvent) -> None:
        with self._lock:
            self._events.append(event)

    def events(self, item_id: Optional[str] = None) -> List[InteractionEvent]:
        with self._lock:
            if item_id is None:
                return list(self._events)
            return [e for e in self._events if e.item_id == item_id]

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)
