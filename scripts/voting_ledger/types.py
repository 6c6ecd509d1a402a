"""Typed definitions for the voting ledger.

Enums:
    WorkflowStatus: 6 ordered values, REGISTERING_VOTERS through VOTES_TALLIED

Records (mutable dataclasses, owned by the ledger registries):
    Voter: whitelisting and ballot state for one address
    Proposal: description and running vote tally

Frozen Dataclasses:
    StatusTransition: single valid administrative status transition
    StatusTransitionRecord: audit entry for one applied transition

Event Types (frozen dataclasses):
    VoterRegistered, WorkflowStatusChange, ProposalRegistered, Voted
    AuditEvent: flattened, serializable form of any of the above

Canonical Lookup Dicts:
    WORKFLOW_TRANSITIONS: dict[WorkflowStatus, StatusTransition]
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Any, ClassVar


# ─── Workflow Status ──────────────────────────────────────────────────────────


class WorkflowStatus(IntEnum):
    """Global stage gating which ledger operations are currently legal.

    Ordinal values are part of the public surface: WorkflowStatusChange
    events carry them as plain integers.
    """

    REGISTERING_VOTERS = 0
    PROPOSALS_REGISTRATION_STARTED = 1
    PROPOSALS_REGISTRATION_ENDED = 2
    VOTING_SESSION_STARTED = 3
    VOTING_SESSION_ENDED = 4
    VOTES_TALLIED = 5


INITIAL_STATUS: WorkflowStatus = WorkflowStatus.REGISTERING_VOTERS
TERMINAL_STATUS: WorkflowStatus = WorkflowStatus.VOTES_TALLIED

# Reserved proposal seeded at position 0 when proposal registration opens.
GENESIS_PROPOSAL_ID: int = 0
GENESIS_DESCRIPTION: str = "GENESIS"


@dataclass(frozen=True)
class StatusTransition:
    """One edge of the administrative status chain.

    action: name of the ledger method that applies this transition
    """

    from_status: WorkflowStatus
    to_status: WorkflowStatus
    action: str


def _chain(*edges: tuple[WorkflowStatus, WorkflowStatus, str]) -> dict[WorkflowStatus, StatusTransition]:
    return {frm: StatusTransition(frm, to, action) for frm, to, action in edges}


# Every non-terminal status has exactly one successor.
WORKFLOW_TRANSITIONS: dict[WorkflowStatus, StatusTransition] = _chain(
    (
        WorkflowStatus.REGISTERING_VOTERS,
        WorkflowStatus.PROPOSALS_REGISTRATION_STARTED,
        "start_proposals_registering",
    ),
    (
        WorkflowStatus.PROPOSALS_REGISTRATION_STARTED,
        WorkflowStatus.PROPOSALS_REGISTRATION_ENDED,
        "end_proposals_registering",
    ),
    (
        WorkflowStatus.PROPOSALS_REGISTRATION_ENDED,
        WorkflowStatus.VOTING_SESSION_STARTED,
        "start_voting_session",
    ),
    (
        WorkflowStatus.VOTING_SESSION_STARTED,
        WorkflowStatus.VOTING_SESSION_ENDED,
        "end_voting_session",
    ),
    (
        WorkflowStatus.VOTING_SESSION_ENDED,
        WorkflowStatus.VOTES_TALLIED,
        "tally_votes",
    ),
)


@dataclass(frozen=True)
class StatusTransitionRecord:
    """Immutable audit entry for one applied status transition."""

    from_status: WorkflowStatus
    to_status: WorkflowStatus
    timestamp: datetime
    triggered_by: str


# ─── Registry Records ─────────────────────────────────────────────────────────


@dataclass
class Voter:
    """Registry entry for one address.

    voted_proposal_id is only meaningful once has_voted is True.
    """

    is_registered: bool = False
    has_voted: bool = False
    voted_proposal_id: int = 0


@dataclass
class Proposal:
    description: str
    vote_count: int = 0


# ─── Events ───────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class VoterRegistered:
    event_name: ClassVar[str] = "VoterRegistered"

    voter_address: str


@dataclass(frozen=True)
class WorkflowStatusChange:
    event_name: ClassVar[str] = "WorkflowStatusChange"

    previous_status: WorkflowStatus
    new_status: WorkflowStatus


@dataclass(frozen=True)
class ProposalRegistered:
    event_name: ClassVar[str] = "ProposalRegistered"

    proposal_id: int


@dataclass(frozen=True)
class Voted:
    event_name: ClassVar[str] = "Voted"

    voter: str
    proposal_id: int


LedgerEvent = VoterRegistered | WorkflowStatusChange | ProposalRegistered | Voted


@dataclass(frozen=True)
class AuditEvent:
    """Serializable envelope for a ledger event.

    sequence: 1-based position of the event in the ledger's event log
    event_name: the event class name (e.g. "Voted")
    data: event fields; enum values are flattened to ints
    """

    sequence: int
    event_name: str
    data: dict[str, Any] = field(default_factory=dict)


def to_audit_event(event: LedgerEvent, sequence: int) -> AuditEvent:
    """Flatten a ledger event into an AuditEvent envelope."""
    data = {
        name: int(value) if isinstance(value, WorkflowStatus) else value
        for name, value in vars(event).items()
    }
    return AuditEvent(sequence=sequence, event_name=event.event_name, data=data)
