"""Observer interfaces for ledger events.

This module defines:
- Protocol interfaces (@runtime_checkable) for structural subtyping:
    EventSink, AuditTrail
- Concrete implementations:
    LoggingEventSink: writes each event to the standard logging module
    InMemoryAuditTrail: list-backed AuditTrail for tests and local runs

The ledger never calls these directly: it returns events to its host, and the
host (see workflow.py) hands them to a sink.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from voting_ledger.types import AuditEvent


logger = logging.getLogger(__name__)


# ─── Protocol Interfaces ──────────────────────────────────────────────────────


@runtime_checkable
class EventSink(Protocol):
    """Anything that accepts ledger events as they are emitted.

    Structural subtyping: external projects can satisfy this without
    inheriting from any base class.
    """

    async def publish(self, event: AuditEvent) -> None:
        """Deliver one event. Events arrive in sequence order."""
        ...


@runtime_checkable
class AuditTrail(Protocol):
    """Interface for a queryable event store."""

    async def record_event(self, event: AuditEvent) -> None:
        """Persist an audit event to the trail."""
        ...

    async def query_events(self, *, event_name: str | None = None) -> list[AuditEvent]:
        """Query recorded events, optionally filtered by event name.

        Returns:
            Matching audit events in sequence order.
        """
        ...


# ─── Implementations ──────────────────────────────────────────────────────────


class LoggingEventSink:
    """EventSink writing one INFO line per event."""

    def __init__(self, ledger_id: str, log: logging.Logger | None = None) -> None:
        self._ledger_id = ledger_id
        self._log = log or logger

    async def publish(self, event: AuditEvent) -> None:
        self._log.info(
            "Ledger %s event #%d %s %s",
            self._ledger_id,
            event.sequence,
            event.event_name,
            event.data,
        )


class InMemoryAuditTrail:
    """AuditTrail and EventSink backed by a plain list."""

    def __init__(self) -> None:
        self._events: list[AuditEvent] = []

    async def record_event(self, event: AuditEvent) -> None:
        self._events.append(event)

    async def publish(self, event: AuditEvent) -> None:
        await self.record_event(event)

    async def query_events(self, *, event_name: str | None = None) -> list[AuditEvent]:
        return [
            e for e in self._events if event_name is None or e.event_name == event_name
        ]
