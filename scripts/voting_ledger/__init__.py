"""Voting Ledger: public API.

A workflow-gated voting ledger: one administrator whitelists voters and moves
the ledger through five ordered statuses; whitelisted voters submit proposals
and cast one vote each; tallying records the winning proposal.

Public API (re-exported from submodules):

Enums:
    WorkflowStatus: 6 values: REGISTERING_VOTERS ... VOTES_TALLIED

Records:
    Voter, Proposal

Frozen Dataclasses:
    StatusTransition: single valid status transition
    StatusTransitionRecord: audit entry for one applied transition

Event Types (frozen dataclasses):
    VoterRegistered, WorkflowStatusChange, ProposalRegistered, Voted
    LedgerEvent (union), AuditEvent (serializable envelope)

Canonical Lookup Dicts:
    WORKFLOW_TRANSITIONS: dict[WorkflowStatus, StatusTransition]

Ledger (from ledger.py):
    LedgerState: mutable ledger runtime state
    VotingLedger: guarded mutators and accessors

Errors (from errors.py):
    LedgerError and its subclasses

Observer Interfaces (from interfaces.py):
    EventSink, AuditTrail, LoggingEventSink, InMemoryAuditTrail
"""

from voting_ledger.errors import (
    AlreadyRegistered,
    AlreadyVoted,
    EmptyProposal,
    InvalidPhaseTransition,
    LedgerError,
    NotAVoter,
    PhaseError,
    ProposalNotFound,
    ProposalsNotOpen,
    Unauthorized,
    VoterRegistrationClosed,
    VotingNotOpen,
)
from voting_ledger.interfaces import (
    AuditTrail,
    EventSink,
    InMemoryAuditTrail,
    LoggingEventSink,
)
from voting_ledger.ledger import LedgerState, VotingLedger
from voting_ledger.types import (
    GENESIS_DESCRIPTION,
    GENESIS_PROPOSAL_ID,
    INITIAL_STATUS,
    TERMINAL_STATUS,
    WORKFLOW_TRANSITIONS,
    AuditEvent,
    LedgerEvent,
    Proposal,
    ProposalRegistered,
    StatusTransition,
    StatusTransitionRecord,
    Voted,
    Voter,
    VoterRegistered,
    WorkflowStatus,
    WorkflowStatusChange,
    to_audit_event,
)

__all__ = [
    # Enums
    "WorkflowStatus",
    # Records
    "Voter",
    "Proposal",
    # Frozen dataclasses
    "StatusTransition",
    "StatusTransitionRecord",
    # Events
    "VoterRegistered",
    "WorkflowStatusChange",
    "ProposalRegistered",
    "Voted",
    "LedgerEvent",
    "AuditEvent",
    "to_audit_event",
    # Constants
    "WORKFLOW_TRANSITIONS",
    "INITIAL_STATUS",
    "TERMINAL_STATUS",
    "GENESIS_PROPOSAL_ID",
    "GENESIS_DESCRIPTION",
    # Ledger
    "LedgerState",
    "VotingLedger",
    # Errors
    "LedgerError",
    "Unauthorized",
    "NotAVoter",
    "AlreadyRegistered",
    "AlreadyVoted",
    "EmptyProposal",
    "ProposalNotFound",
    "PhaseError",
    "InvalidPhaseTransition",
    "VoterRegistrationClosed",
    "ProposalsNotOpen",
    "VotingNotOpen",
    # Observer interfaces
    "EventSink",
    "AuditTrail",
    "LoggingEventSink",
    "InMemoryAuditTrail",
]
