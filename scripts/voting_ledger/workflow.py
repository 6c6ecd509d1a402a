"""Temporal workflow hosting one voting ledger.

Wraps VotingLedger with durable Temporal execution. Updates are used for all
state mutations (add_voter, change_status, add_proposal, set_vote) so the
caller receives the emitted event or the rejection synchronously; queries are
used for reads (get_voter, get_one_proposal, current_state, winning_proposal).
Search attributes are updated on every status change for forensic
queryability.

Design rules:
- Workflow code MUST be deterministic: no I/O, no random, no datetime.now().
- The ledger's transition records are stamped with workflow.now().
- Temporal runs handlers of one workflow one at a time, which gives the ledger
  its serialized, non-reentrant execution model without explicit locking.
- A LedgerError becomes a non-retryable ApplicationError whose type is the
  error class name. The update fails; the workflow keeps running.
- Activities handle non-deterministic operations (event publication).
- One workflow per ledger.

Key types (all frozen dataclasses):
    LedgerInput: workflow run() input
    LedgerResult: workflow run() return value
    VoterRequest: add_voter update / get_voter query payload
    StatusChangeRequest: change_status update payload
    ProposalRequest: add_proposal update payload
    VoteRequest: set_vote update payload
    ProposalQuery: get_one_proposal query payload
    LedgerSnapshot: current_state query result

Search attribute keys:
    SA_LEDGER_ID: text key for ledger ID forensic lookup
    SA_STATUS: keyword key for current workflow status
    SA_WINNER: keyword key for the tallied winning proposal

Activities:
    publish_events(ledger_id, events) -> None
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta
from typing import TypeVar

from temporalio import activity, workflow
from temporalio.common import SearchAttributeKey
from temporalio.exceptions import ApplicationError

from voting_ledger.errors import LedgerError
from voting_ledger.interfaces import LoggingEventSink
from voting_ledger.ledger import VotingLedger
from voting_ledger.types import (
    TERMINAL_STATUS,
    AuditEvent,
    Proposal,
    ProposalRegistered,
    Voted,
    Voter,
    VoterRegistered,
    WorkflowStatus,
    WorkflowStatusChange,
    to_audit_event,
)

_T = TypeVar("_T")

logger = logging.getLogger(__name__)

# ─── Search Attribute Keys ────────────────────────────────────────────────────
# These keys are registered in the Temporal namespace and used for forensic
# querying: "find all ledgers where VotingStatus='VOTING_SESSION_STARTED'" etc.

SA_LEDGER_ID: SearchAttributeKey = SearchAttributeKey.for_text("VotingLedgerId")
SA_STATUS: SearchAttributeKey = SearchAttributeKey.for_keyword("VotingStatus")
SA_WINNER: SearchAttributeKey = SearchAttributeKey.for_keyword("VotingWinner")


# ─── Update / Query Types (frozen dataclasses) ────────────────────────────────


@dataclass(frozen=True)
class LedgerInput:
    """Input for VotingWorkflow.run().

    ledger_id: globally unique ledger identifier (e.g. "council-2026")
    owner: address of the administrator allowed to whitelist and transition
    """

    ledger_id: str
    owner: str


@dataclass(frozen=True)
class LedgerResult:
    """Return value of VotingWorkflow.run() once votes are tallied.

    final_status: should always be WorkflowStatus.VOTES_TALLIED
    winning_proposal_id: 0 when no vote was cast
    proposal_count: user proposals only (GENESIS excluded)
    event_count: total number of events emitted by the ledger
    """

    ledger_id: str
    final_status: WorkflowStatus
    winning_proposal_id: int
    proposal_count: int
    event_count: int


@dataclass(frozen=True)
class VoterRequest:
    """caller acts on (add_voter) or reads (get_voter) address."""

    caller: str
    address: str


@dataclass(frozen=True)
class StatusChangeRequest:
    caller: str
    to_status: WorkflowStatus


@dataclass(frozen=True)
class ProposalRequest:
    caller: str
    description: str


@dataclass(frozen=True)
class VoteRequest:
    caller: str
    proposal_id: int


@dataclass(frozen=True)
class ProposalQuery:
    caller: str
    proposal_id: int


@dataclass(frozen=True)
class LedgerSnapshot:
    """Public, ungated summary of a ledger."""

    ledger_id: str
    owner: str
    workflow_status: WorkflowStatus
    voter_count: int
    proposal_count: int
    winning_proposal_id: int | None
    event_count: int
    transition_count: int


def snapshot(ledger: VotingLedger) -> LedgerSnapshot:
    state = ledger.state
    return LedgerSnapshot(
        ledger_id=state.ledger_id,
        owner=state.owner,
        workflow_status=state.workflow_status,
        voter_count=sum(1 for v in state.voters.values() if v.is_registered),
        proposal_count=ledger.proposal_count,
        winning_proposal_id=state.winning_proposal_id,
        event_count=len(state.event_log),
        transition_count=len(state.transition_history),
    )


def to_application_error(error: LedgerError) -> ApplicationError:
    """Translate a ledger rejection into a non-retryable Temporal failure."""
    return ApplicationError(error.reason, type=type(error).__name__, non_retryable=True)


# ─── Activities ───────────────────────────────────────────────────────────────


@activity.defn
async def publish_events(ledger_id: str, events: list[AuditEvent]) -> None:
    """Hand a batch of ledger events to the event sink, in sequence order.

    This is an activity because delivering events to observers is I/O.
    """
    logger.debug("Publishing %d events for ledger %s", len(events), ledger_id)
    sink = LoggingEventSink(ledger_id)
    for event in events:
        await sink.publish(event)


# ─── Workflow ─────────────────────────────────────────────────────────────────


@workflow.defn
class VotingWorkflow:
    """Durable Temporal workflow owning one VotingLedger.

    Lifecycle:
        1. __init__ creates the ledger so handlers work before run() starts.
        2. run() sets initial search attributes and loops, waiting for new
           ledger events.
        3. Each batch of new events is published through an activity; search
           attributes are upserted when the batch contains a status change.
        4. When the status reaches VOTES_TALLIED and every event has been
           published, run() returns LedgerResult.

    Updates:
        add_voter(VoterRequest)            -> VoterRegistered
        change_status(StatusChangeRequest) -> WorkflowStatusChange
        add_proposal(ProposalRequest)      -> ProposalRegistered
        set_vote(VoteRequest)              -> Voted

    Queries:
        get_voter(VoterRequest)        -> Voter
        get_one_proposal(ProposalQuery) -> Proposal
        current_state()                -> LedgerSnapshot
        winning_proposal()             -> int | None
    """

    @workflow.init
    def __init__(self, input: LedgerInput) -> None:
        self._ledger = VotingLedger(input.owner, input.ledger_id, clock=workflow.now)
        # Number of ledger events already handed to publish_events.
        self._published: int = 0

    # ── Run ───────────────────────────────────────────────────────────────────

    @workflow.run
    async def run(self, input: LedgerInput) -> LedgerResult:
        """Main workflow loop: publish events until votes are tallied."""
        state = self._ledger.state
        workflow.upsert_search_attributes(
            [
                SA_LEDGER_ID.value_set(input.ledger_id),
                SA_STATUS.value_set(state.workflow_status.name),
            ]
        )

        while True:
            await workflow.wait_condition(lambda: self._published < len(state.event_log))

            batch = state.event_log[self._published:]
            audit = [
                to_audit_event(event, self._published + offset + 1)
                for offset, event in enumerate(batch)
            ]
            self._published += len(batch)

            await workflow.execute_activity(
                publish_events,
                args=[input.ledger_id, audit],
                start_to_close_timeout=timedelta(seconds=10),
            )

            if any(isinstance(event, WorkflowStatusChange) for event in batch):
                updates = [SA_STATUS.value_set(state.workflow_status.name)]
                if state.winning_proposal_id is not None:
                    updates.append(SA_WINNER.value_set(str(state.winning_proposal_id)))
                workflow.upsert_search_attributes(updates)

            if (
                state.workflow_status == TERMINAL_STATUS
                and self._published == len(state.event_log)
            ):
                break

        await workflow.wait_condition(workflow.all_handlers_finished)
        return LedgerResult(
            ledger_id=input.ledger_id,
            final_status=state.workflow_status,
            winning_proposal_id=state.winning_proposal_id or 0,
            proposal_count=self._ledger.proposal_count,
            event_count=len(state.event_log),
        )

    def _apply(self, operation: Callable[[], _T]) -> _T:
        try:
            return operation()
        except LedgerError as e:
            raise to_application_error(e) from e

    # ── Updates ───────────────────────────────────────────────────────────────

    @workflow.update
    def add_voter(self, request: VoterRequest) -> VoterRegistered:
        return self._apply(lambda: self._ledger.add_voter(request.caller, request.address))

    @workflow.update
    def change_status(self, request: StatusChangeRequest) -> WorkflowStatusChange:
        """Update: apply one administrative status transition.

        The target status must be the direct successor of the current one;
        anything else fails with type InvalidPhaseTransition.
        """
        return self._apply(lambda: self._ledger.advance(request.caller, request.to_status))

    @workflow.update
    def add_proposal(self, request: ProposalRequest) -> ProposalRegistered:
        return self._apply(
            lambda: self._ledger.add_proposal(request.caller, request.description)
        )

    @workflow.update
    def set_vote(self, request: VoteRequest) -> Voted:
        return self._apply(lambda: self._ledger.set_vote(request.caller, request.proposal_id))

    # ── Queries ───────────────────────────────────────────────────────────────

    @workflow.query
    def get_voter(self, query: VoterRequest) -> Voter:
        return self._apply(lambda: self._ledger.get_voter(query.caller, query.address))

    @workflow.query
    def get_one_proposal(self, query: ProposalQuery) -> Proposal:
        return self._apply(
            lambda: self._ledger.get_one_proposal(query.caller, query.proposal_id)
        )

    @workflow.query
    def current_state(self) -> LedgerSnapshot:
        """Query: ungated snapshot of the ledger (status, counts, winner)."""
        return snapshot(self._ledger)

    @workflow.query
    def winning_proposal(self) -> int | None:
        """Query: the tallied winner, or None before VOTES_TALLIED."""
        return self._ledger.winning_proposal_id
