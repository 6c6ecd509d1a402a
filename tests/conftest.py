"""Shared pytest fixtures for the voting_ledger test suite.

Provides common VotingLedger setup patterns used across multiple test files
to avoid repeated inline boilerplate and keep tests focused on behaviour.
"""

from __future__ import annotations

import pytest

from voting_ledger.ledger import VotingLedger

OWNER = "0xowner"
VOTER_ONE = "0xvoter1"
VOTER_TWO = "0xvoter2"
VOTER_THREE = "0xvoter3"
STRANGER = "0xstranger"


@pytest.fixture
def ledger() -> VotingLedger:
    return VotingLedger(OWNER, "test-ledger")


@pytest.fixture
def ledger_with_voters(ledger: VotingLedger) -> VotingLedger:
    """Ledger still registering voters, with VOTER_ONE..THREE whitelisted."""
    for address in (VOTER_ONE, VOTER_TWO, VOTER_THREE):
        ledger.add_voter(OWNER, address)
    return ledger


@pytest.fixture
def ledger_taking_proposals(ledger_with_voters: VotingLedger) -> VotingLedger:
    """Ledger in PROPOSALS_REGISTRATION_STARTED."""
    ledger_with_voters.start_proposals_registering(OWNER)
    return ledger_with_voters


@pytest.fixture
def ledger_voting(ledger_taking_proposals: VotingLedger) -> VotingLedger:
    """Ledger in VOTING_SESSION_STARTED with proposals 1 ("X") and 2 ("Y")."""
    ledger_taking_proposals.add_proposal(VOTER_ONE, "X")
    ledger_taking_proposals.add_proposal(VOTER_TWO, "Y")
    ledger_taking_proposals.end_proposals_registering(OWNER)
    ledger_taking_proposals.start_voting_session(OWNER)
    return ledger_taking_proposals
