import pytest

from lotto_action.tickets.labels import (
    CHECKED_LABEL,
    LABEL_TAXONOMY,
    WAITING_LABEL,
    labels_for_ranks,
    rank_labels_from,
    rank_to_label,
    status_from_labels,
)
from lotto_action.tickets.models import LottoRank
from lotto_action.tickets.state import TicketStateMachine, TicketStatus


def test_ticket_state_machine_allows_only_awaiting_to_checked():
    assert TicketStateMachine.initial_state() == TicketStatus.AWAITING
    assert TicketStateMachine.can_transition(TicketStatus.AWAITING, TicketStatus.CHECKED)
    assert not TicketStateMachine.can_transition(TicketStatus.CHECKED, TicketStatus.AWAITING)
    assert not TicketStateMachine.can_transition(TicketStatus.CHECKED, TicketStatus.CHECKED)


def test_ticket_state_machine_blocks_repeated_check():
    with pytest.raises(ValueError):
        TicketStateMachine.assert_transition(TicketStatus.CHECKED, TicketStatus.CHECKED)


@pytest.mark.parametrize("rank", list(LottoRank))
def test_rank_to_label_is_total_and_deterministic(rank):
    label = rank_to_label(rank)

    assert label == rank_to_label(int(rank))
    assert label in {item.name for item in LABEL_TAXONOMY}


def test_rank_to_label_rejects_unknown_rank():
    with pytest.raises(ValueError):
        rank_to_label(6)


def test_rank_labels_are_distinct():
    assert len({rank_to_label(rank) for rank in LottoRank}) == len(LottoRank)


def test_labels_for_ranks_deduplicates():
    assert labels_for_ranks([5, 5, 3]) == frozenset({rank_to_label(5), rank_to_label(3)})
    assert labels_for_ranks([]) == frozenset()


def test_status_and_rank_labels_are_read_from_issue_labels():
    labels = [CHECKED_LABEL.name, rank_to_label(LottoRank.FIFTH), "bug"]

    assert status_from_labels(labels) == TicketStatus.CHECKED
    assert status_from_labels([WAITING_LABEL.name]) == TicketStatus.AWAITING
    assert rank_labels_from(labels) == frozenset({rank_to_label(LottoRank.FIFTH)})
