"""Issue labels used to encode ticket status and prize results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

from .models import LottoRank
from .state import TicketStatus


@dataclass(frozen=True, slots=True)
class LabelSpec:
    """Name, colour and description of a label the store must provide."""

    name: str
    color: str
    description: str


WAITING_LABEL = LabelSpec("waiting", "fbca04", "Purchased ticket waiting for the draw result")
CHECKED_LABEL = LabelSpec("checked", "0e8a16", "Ticket checked against the draw result")

RANK_LABELS: Mapping[LottoRank, LabelSpec] = {
    LottoRank.FIRST: LabelSpec("1st prize", "b60205", "Matched all six numbers"),
    LottoRank.SECOND: LabelSpec("2nd prize", "d93f0b", "Matched five numbers and the bonus number"),
    LottoRank.THIRD: LabelSpec("3rd prize", "e99695", "Matched five numbers"),
    LottoRank.FOURTH: LabelSpec("4th prize", "f9d0c4", "Matched four numbers"),
    LottoRank.FIFTH: LabelSpec("5th prize", "c5def5", "Matched three numbers"),
    LottoRank.NONE: LabelSpec("no win", "ededed", "No prize"),
}

STATUS_LABELS: Mapping[TicketStatus, LabelSpec] = {
    TicketStatus.AWAITING: WAITING_LABEL,
    TicketStatus.CHECKED: CHECKED_LABEL,
}

LABEL_TAXONOMY: tuple[LabelSpec, ...] = (WAITING_LABEL, CHECKED_LABEL, *RANK_LABELS.values())


def rank_to_label(rank: int | LottoRank) -> str:
    """Map a rank to its label name; every rank has exactly one label."""

    return RANK_LABELS[LottoRank(rank)].name


def labels_for_ranks(ranks: Iterable[int | LottoRank]) -> frozenset[str]:
    return frozenset(rank_to_label(rank) for rank in ranks)


def status_from_labels(labels: Iterable[str]) -> TicketStatus:
    names = set(labels)
    if CHECKED_LABEL.name in names:
        return TicketStatus.CHECKED
    return TicketStatus.AWAITING


def rank_labels_from(labels: Iterable[str]) -> frozenset[str]:
    known = {label.name for label in RANK_LABELS.values()}
    return frozenset(name for name in labels if name in known)
