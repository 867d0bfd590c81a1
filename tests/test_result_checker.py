from __future__ import annotations

import pytest

from lotto_action.errors import CheckError
from lotto_action.lotto.session import DrawNotAnnouncedError
from lotto_action.services.checker import ResultChecker
from lotto_action.tickets.labels import rank_to_label
from lotto_action.tickets.models import LottoRank
from lotto_action.tickets.state import TicketStatus

from tests.fakes import FakeSession, InMemoryTicketStore, make_ticket

A = [1, 2, 3, 4, 5, 6]
B = [7, 8, 9, 10, 11, 12]
C = [13, 14, 15, 16, 17, 18]


@pytest.mark.asyncio
async def test_check_all_without_waiting_tickets_is_a_no_op(store, session):
    report = await ResultChecker(store, session).check_all()

    assert report.success
    assert report.failure_count == 0
    assert report.checked == []
    assert store.marked == []
    assert session.checks == []


@pytest.mark.asyncio
async def test_duplicate_ranks_collapse_into_one_label():
    store = InMemoryTicketStore([make_ticket(1, [A, B, C], round_number=1084)])
    session = FakeSession(
        ranks={tuple(A): LottoRank.FIFTH, tuple(B): LottoRank.FIFTH, tuple(C): LottoRank.THIRD}
    )

    report = await ResultChecker(store, session).check_all()

    assert report.checked == [1]
    assert store.marked == [(1, frozenset({rank_to_label(5), rank_to_label(3)}))]
    assert len(store.marked[0][1]) == 2
    assert sorted(session.checks) == sorted([(tuple(A), 1084), (tuple(B), 1084), (tuple(C), 1084)])


@pytest.mark.asyncio
async def test_undecodable_ticket_fails_alone():
    store = InMemoryTicketStore(
        [make_ticket(1, [A]), make_ticket(2, [], body="purchased by hand, no payload")]
    )
    session = FakeSession(ranks={tuple(A): LottoRank.FOURTH})

    report = await ResultChecker(store, session).check_all()

    assert report.checked == [1]
    assert report.failure_count == 1
    assert isinstance(report.failures[0], CheckError)
    assert report.failures[0].ticket_id == 2
    assert store.tickets[1].status == TicketStatus.CHECKED
    assert store.tickets[2].status == TicketStatus.AWAITING


@pytest.mark.asyncio
async def test_check_and_store_failures_are_isolated_per_ticket():
    class FlakySession(FakeSession):
        async def check(self, combination, round_number):
            if round_number == 1085:
                raise DrawNotAnnouncedError("Round 1085 has no published result")
            return await super().check(combination, round_number)

    store = InMemoryTicketStore(
        [
            make_ticket(1, [A], round_number=1084),
            make_ticket(2, [B], round_number=1085),
            make_ticket(3, [C], round_number=1084),
        ]
    )
    store.fail_mark_for.add(3)

    report = await ResultChecker(store, FlakySession()).check_all()

    assert report.checked == [1]
    assert sorted(error.ticket_id for error in report.failures) == [2, 3]
    assert store.tickets[2].status == TicketStatus.AWAITING
    assert store.tickets[3].status == TicketStatus.AWAITING


@pytest.mark.asyncio
async def test_second_pass_does_not_relabel_checked_tickets():
    store = InMemoryTicketStore([make_ticket(1, [A])])
    session = FakeSession(ranks={tuple(A): LottoRank.FIRST})
    checker = ResultChecker(store, session)

    first = await checker.check_all()
    second = await checker.check_all()

    assert first.checked == [1]
    assert second.checked == []
    assert len(store.marked) == 1
    assert store.tickets[1].rank_labels == frozenset({rank_to_label(LottoRank.FIRST)})


@pytest.mark.asyncio
async def test_ticket_with_empty_body_is_skipped_without_writes():
    store = InMemoryTicketStore([make_ticket(2, [A], body="")])

    report = await ResultChecker(store, FakeSession()).check_all()

    assert report.success
    assert report.skipped == [2]
    assert store.marked == []
    assert store.tickets[2].status == TicketStatus.AWAITING


@pytest.mark.asyncio
async def test_ticket_without_numbers_is_checked_once_without_rank_labels():
    store = InMemoryTicketStore([make_ticket(1, [])])
    session = FakeSession()
    checker = ResultChecker(store, session)

    first = await checker.check_all()
    second = await checker.check_all()

    assert first.checked == [1]
    assert first.skipped == []
    assert second.checked == [] and second.skipped == []
    assert store.marked == [(1, frozenset())]
    assert session.checks == []
    assert store.tickets[1].status == TicketStatus.CHECKED


@pytest.mark.asyncio
async def test_listing_failure_propagates():
    store = InMemoryTicketStore()

    async def broken_listing():
        raise RuntimeError("store offline")

    store.list_awaiting_tickets = broken_listing

    with pytest.raises(RuntimeError):
        await ResultChecker(store, FakeSession()).check_all()
