"""Vote casting and winner computation."""

from __future__ import annotations

import datetime
from dataclasses import dataclass

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from core.elections_audit import record_event
from core.elections_errors import (
    AlreadyVotedError,
    CandidateNotApprovedError,
    ElectionNotActiveError,
    NotFoundError,
    UnauthorizedError,
)
from core.models import Candidate, Election, Voter


@dataclass(frozen=True)
class VoteReceipt:
    identity: str
    candidate_index: int
    cast_at: datetime.datetime


@dataclass(frozen=True)
class WinnerResult:
    name: str
    party: str
    votes: int
    index: int | None

    @property
    def has_winner(self) -> bool:
        return bool(self.name)


# Returned when there are no candidates or no candidate has a vote.
NO_WINNER = WinnerResult(name="", party="", votes=0, index=None)


def _parse_candidate_index(raw: object) -> int:
    if isinstance(raw, bool):
        raise NotFoundError(f"No candidate with index {raw!r}")
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError, OverflowError):
        raise NotFoundError(f"No candidate with index {raw!r}") from None


@transaction.atomic
def cast_vote(*, caller: str, candidate_index: object) -> VoteReceipt:
    """Record one vote for ``candidate_index`` on behalf of ``caller``.

    All checks and both writes happen under the election row lock, in this
    order: election active, caller logged in, caller has not voted, candidate
    exists, candidate approved.
    """
    identity = str(caller or "").strip().lower()

    election = Election.load_for_update()
    if election.status != Election.Status.active:
        raise ElectionNotActiveError("Election is not active")

    voter = Voter.objects.select_for_update().filter(identity=identity).first() if identity else None
    if voter is None or not voter.session_active:
        raise UnauthorizedError("Voter must be registered and logged in to vote")
    if voter.has_voted:
        raise AlreadyVotedError("Voter has already voted")

    index = _parse_candidate_index(candidate_index)
    candidate = Candidate.objects.select_for_update().filter(index=index).first()
    if candidate is None:
        raise NotFoundError(f"No candidate with index {index}")
    if not candidate.is_approved:
        raise CandidateNotApprovedError(f"Candidate {index} is not approved")

    cast_at = timezone.now()

    # Conditional latch: if another transaction already flipped the flag,
    # nothing is updated and this vote is rejected.
    latched = Voter.objects.filter(pk=voter.pk, has_voted=False).update(
        has_voted=True,
        voted_candidate_index=candidate.index,
        voted_at=cast_at,
    )
    if latched != 1:
        raise AlreadyVotedError("Voter has already voted")

    # Raising here rolls the latch back with the rest of the transaction.
    counted = Candidate.objects.filter(pk=candidate.pk, is_approved=True).update(votes=F("votes") + 1)
    if counted != 1:
        raise CandidateNotApprovedError(f"Candidate {index} is not approved")

    record_event(
        election=election,
        event_type="vote_cast",
        actor=identity,
        payload={
            "identity": identity,
            "candidate_index": candidate.index,
            "cast_at": cast_at.isoformat(),
        },
        is_public=False,
    )
    return VoteReceipt(identity=identity, candidate_index=candidate.index, cast_at=cast_at)


def compute_winner() -> WinnerResult:
    """Most votes wins; on a tie the lowest index (first registered) wins."""
    leader = Candidate.objects.filter(votes__gt=0).order_by("-votes", "index").first()
    if leader is None:
        return NO_WINNER
    return WinnerResult(name=leader.name, party=leader.party, votes=int(leader.votes), index=int(leader.index))


def tally_summary() -> dict[str, int]:
    """Totals used to check that counters and latches agree."""
    total_votes = sum(Candidate.objects.values_list("votes", flat=True))
    return {
        "total_votes": int(total_votes),
        "voters_voted": Voter.objects.filter(has_voted=True).count(),
        "candidates": Candidate.objects.count(),
    }
