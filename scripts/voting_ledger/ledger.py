"""Workflow-gated voting ledger.

A single aggregate owning one status variable and two flat registries
(voters keyed by address, proposals keyed by position). Every operation
checks all of its guards before mutating anything, so a rejected call leaves
the registries, the status and both logs exactly as they were.

Key types:
    LedgerState: mutable runtime state of one ledger
    VotingLedger: guarded mutators and accessors over a LedgerState

Authorization model:
    - The owner (administrator) whitelists voters and drives status transitions.
    - Whitelisted voters submit proposals, vote, and read voter/proposal records.
    - Reads of voter and proposal records are gated exactly like writes:
      unregistered callers get NotAVoter, the owner included.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from voting_ledger.errors import (
    AlreadyRegistered,
    AlreadyVoted,
    EmptyProposal,
    InvalidPhaseTransition,
    NotAVoter,
    ProposalNotFound,
    ProposalsNotOpen,
    Unauthorized,
    VoterRegistrationClosed,
    VotingNotOpen,
)
from voting_ledger.types import (
    GENESIS_DESCRIPTION,
    GENESIS_PROPOSAL_ID,
    INITIAL_STATUS,
    TERMINAL_STATUS,
    WORKFLOW_TRANSITIONS,
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
)


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


@dataclass
class LedgerState:
    """Mutable runtime state of one voting ledger.

    proposals[0] is the GENESIS proposal once proposal registration has
    started; user proposals follow at 1, 2, ...
    winning_proposal_id stays None until votes are tallied.
    """

    ledger_id: str
    owner: str
    workflow_status: WorkflowStatus = INITIAL_STATUS
    voters: dict[str, Voter] = field(default_factory=dict)
    proposals: list[Proposal] = field(default_factory=list)
    winning_proposal_id: int | None = None
    transition_history: list[StatusTransitionRecord] = field(default_factory=list)
    event_log: list[LedgerEvent] = field(default_factory=list)


class VotingLedger:
    """Five-status voting state machine with owner and voter gating.

    Args:
        owner: address of the administrator.
        ledger_id: identifier used by hosting layers (workflow id, logs).
        transitions: status transition table; injectable for tests.
        clock: timestamp source for transition records. Hosting layers that
            must stay deterministic (Temporal workflows) pass their own clock.
    """

    def __init__(
        self,
        owner: str,
        ledger_id: str = "voting-ledger",
        *,
        transitions: dict[WorkflowStatus, StatusTransition] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._state = LedgerState(ledger_id=ledger_id, owner=owner)
        self._transitions = transitions if transitions is not None else WORKFLOW_TRANSITIONS
        self._clock = clock or _utc_now

    # ── Public reads ──────────────────────────────────────────────────────────

    @property
    def state(self) -> LedgerState:
        return self._state

    @property
    def owner(self) -> str:
        return self._state.owner

    @property
    def workflow_status(self) -> WorkflowStatus:
        return self._state.workflow_status

    @property
    def winning_proposal_id(self) -> int | None:
        return self._state.winning_proposal_id

    @property
    def proposal_count(self) -> int:
        """Number of user proposals (GENESIS excluded)."""
        return max(len(self._state.proposals) - 1, 0)

    def is_voter(self, address: str) -> bool:
        voter = self._state.voters.get(address)
        return voter is not None and voter.is_registered

    # ── Guards ────────────────────────────────────────────────────────────────

    def _require_owner(self, caller: str) -> None:
        if caller != self._state.owner:
            raise Unauthorized()

    def _require_voter(self, caller: str) -> None:
        if not self.is_voter(caller):
            raise NotAVoter()

    def _require_proposal(self, proposal_id: int, *, allow_genesis: bool) -> Proposal:
        lowest = GENESIS_PROPOSAL_ID if allow_genesis else GENESIS_PROPOSAL_ID + 1
        if not lowest <= proposal_id < len(self._state.proposals):
            raise ProposalNotFound()
        return self._state.proposals[proposal_id]

    def _emit(self, event: LedgerEvent) -> LedgerEvent:
        self._state.event_log.append(event)
        return event

    # ── Voter registration ────────────────────────────────────────────────────

    def add_voter(self, caller: str, address: str) -> VoterRegistered:
        """Whitelist address. Owner only, while voters are being registered.

        Raises:
            Unauthorized: caller is not the owner.
            VoterRegistrationClosed: status is past REGISTERING_VOTERS.
            AlreadyRegistered: address is already whitelisted.
        """
        self._require_owner(caller)
        if self._state.workflow_status != WorkflowStatus.REGISTERING_VOTERS:
            raise VoterRegistrationClosed(self._state.workflow_status)
        if self.is_voter(address):
            raise AlreadyRegistered()

        self._state.voters.setdefault(address, Voter()).is_registered = True
        return self._emit(VoterRegistered(voter_address=address))

    # ── Status transitions ────────────────────────────────────────────────────

    def validate_advance(self, to_status: WorkflowStatus) -> list[str]:
        """Dry run of the status guard. Returns violations; empty means valid."""
        current = self._state.workflow_status
        if current == TERMINAL_STATUS:
            return [
                f"Ledger is at {TERMINAL_STATUS.name}: no transition to "
                f"{to_status.name} is possible"
            ]
        transition = self._transitions.get(current)
        if transition is None or transition.to_status != to_status:
            expected = transition.to_status.name if transition else "nothing"
            return [
                f"Cannot move from {current.name} to {to_status.name}: "
                f"the next status is {expected}"
            ]
        return []

    def advance(self, caller: str, to_status: WorkflowStatus) -> WorkflowStatusChange:
        """Apply one administrative status transition.

        Raises:
            Unauthorized: caller is not the owner.
            InvalidPhaseTransition: to_status is not the successor of the
                current status.
        """
        self._require_owner(caller)
        violations = self.validate_advance(to_status)
        if violations:
            raise InvalidPhaseTransition(self._state.workflow_status, violations)

        previous = self._state.workflow_status
        if to_status == WorkflowStatus.PROPOSALS_REGISTRATION_STARTED and not self._state.proposals:
            self._state.proposals.append(Proposal(description=GENESIS_DESCRIPTION))
        if to_status == WorkflowStatus.VOTES_TALLIED:
            self._state.winning_proposal_id = self._winning_proposal()

        self._state.workflow_status = to_status
        self._state.transition_history.append(
            StatusTransitionRecord(
                from_status=previous,
                to_status=to_status,
                timestamp=self._clock(),
                triggered_by=caller,
            )
        )
        return self._emit(WorkflowStatusChange(previous_status=previous, new_status=to_status))

    def start_proposals_registering(self, caller: str) -> WorkflowStatusChange:
        return self.advance(caller, WorkflowStatus.PROPOSALS_REGISTRATION_STARTED)

    def end_proposals_registering(self, caller: str) -> WorkflowStatusChange:
        return self.advance(caller, WorkflowStatus.PROPOSALS_REGISTRATION_ENDED)

    def start_voting_session(self, caller: str) -> WorkflowStatusChange:
        return self.advance(caller, WorkflowStatus.VOTING_SESSION_STARTED)

    def end_voting_session(self, caller: str) -> WorkflowStatusChange:
        return self.advance(caller, WorkflowStatus.VOTING_SESSION_ENDED)

    def tally_votes(self, caller: str) -> WorkflowStatusChange:
        """Close the ledger and record the winning proposal.

        The winner is the proposal with the strictly highest vote_count; on a
        tie the lowest identifier wins. With no votes at all GENESIS (0) is
        recorded, meaning there is no winner.
        """
        return self.advance(caller, WorkflowStatus.VOTES_TALLIED)

    def _winning_proposal(self) -> int:
        winner = GENESIS_PROPOSAL_ID
        best = 0
        for proposal_id, proposal in enumerate(self._state.proposals):
            # Strict comparison keeps the earliest proposal on ties.
            if proposal.vote_count > best:
                best = proposal.vote_count
                winner = proposal_id
        return winner

    # ── Proposals ─────────────────────────────────────────────────────────────

    def add_proposal(self, caller: str, description: str) -> ProposalRegistered:
        """Register a proposal and return its event carrying the new id.

        Raises:
            NotAVoter: caller is not whitelisted.
            ProposalsNotOpen: status is not PROPOSALS_REGISTRATION_STARTED.
            EmptyProposal: description is empty.
        """
        self._require_voter(caller)
        if self._state.workflow_status != WorkflowStatus.PROPOSALS_REGISTRATION_STARTED:
            raise ProposalsNotOpen(self._state.workflow_status)
        if not description:
            raise EmptyProposal()

        self._state.proposals.append(Proposal(description=description))
        return self._emit(ProposalRegistered(proposal_id=len(self._state.proposals) - 1))

    # ── Votes ─────────────────────────────────────────────────────────────────

    def set_vote(self, caller: str, proposal_id: int) -> Voted:
        """Cast caller's single, final vote for proposal_id.

        Raises:
            NotAVoter: caller is not whitelisted.
            VotingNotOpen: status is not VOTING_SESSION_STARTED.
            AlreadyVoted: caller has voted before.
            ProposalNotFound: proposal_id is not a user proposal.
        """
        self._require_voter(caller)
        if self._state.workflow_status != WorkflowStatus.VOTING_SESSION_STARTED:
            raise VotingNotOpen(self._state.workflow_status)
        voter = self._state.voters[caller]
        if voter.has_voted:
            raise AlreadyVoted()
        proposal = self._require_proposal(proposal_id, allow_genesis=False)

        proposal.vote_count += 1
        voter.has_voted = True
        voter.voted_proposal_id = proposal_id
        return self._emit(Voted(voter=caller, proposal_id=proposal_id))

    # ── Gated reads ───────────────────────────────────────────────────────────

    def get_voter(self, caller: str, address: str) -> Voter:
        """Return a copy of address's record; zero-valued if never whitelisted."""
        self._require_voter(caller)
        voter = self._state.voters.get(address)
        return replace(voter) if voter is not None else Voter()

    def get_one_proposal(self, caller: str, proposal_id: int) -> Proposal:
        """Return a copy of the proposal at proposal_id (0 is GENESIS)."""
        self._require_voter(caller)
        return replace(self._require_proposal(proposal_id, allow_genesis=True))
