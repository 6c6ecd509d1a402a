"""Failure taxonomy for the voting ledger.

Every failure is synchronous and aborts the requested operation before any
state is touched. The ledger never retries or recovers; callers present the
reason to end users.

Hierarchy:
    LedgerError
    ├── Unauthorized
    ├── NotAVoter
    ├── AlreadyRegistered
    ├── AlreadyVoted
    ├── EmptyProposal
    ├── ProposalNotFound
    └── PhaseError
        ├── InvalidPhaseTransition
        ├── VoterRegistrationClosed
        ├── ProposalsNotOpen
        └── VotingNotOpen
"""

from __future__ import annotations

from voting_ledger.types import WorkflowStatus


class LedgerError(Exception):
    """Base class for all ledger rejections.

    reason: human-readable revert reason
    """

    default_reason: str = "operation rejected"

    def __init__(self, reason: str | None = None) -> None:
        self.reason = reason or self.default_reason
        super().__init__(self.reason)


class Unauthorized(LedgerError):
    default_reason = "caller is not the owner"


class NotAVoter(LedgerError):
    default_reason = "You're not a voter"


class AlreadyRegistered(LedgerError):
    default_reason = "Already registered"


class AlreadyVoted(LedgerError):
    default_reason = "You have already voted"


class EmptyProposal(LedgerError):
    default_reason = "Vous ne pouvez pas ne rien proposer"


class ProposalNotFound(LedgerError):
    default_reason = "Proposal not found"


class PhaseError(LedgerError):
    """The current workflow status does not allow the operation."""

    def __init__(self, current_status: WorkflowStatus, reason: str | None = None) -> None:
        self.current_status = current_status
        super().__init__(reason)


class InvalidPhaseTransition(PhaseError):
    """An administrative status transition was requested out of order.

    violations: one message per failed guard (never empty)
    """

    def __init__(self, current_status: WorkflowStatus, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(current_status, "; ".join(violations))


class VoterRegistrationClosed(PhaseError):
    default_reason = "Voters registration is not open yet"


class ProposalsNotOpen(PhaseError):
    default_reason = "Proposals are not allowed yet"


class VotingNotOpen(PhaseError):
    default_reason = "Voting session havent started yet"
