from __future__ import annotations

from django.db import transaction
from django.db.models import Max
from django.utils import timezone

from core.elections_audit import record_event
from core.elections_authority import AdminAuthority
from core.elections_errors import InvalidInputError, NotFoundError
from core.elections_validation import clean_age, clean_name, clean_optional_text, normalize_identity
from core.models import Candidate, Election


@transaction.atomic
def register_candidate(*, name: str, age: object, party: str, identity: str, caller: str | None = None) -> Candidate:
    """Register a candidate under the next free index, unapproved and with zero votes.

    Open to any caller and allowed before the election exists.
    """
    cleaned_name = clean_name(name)
    cleaned_age = clean_age(age)
    cleaned_party = clean_optional_text(party, field_label="party")
    cleaned_identity = normalize_identity(identity)

    # The election row is the write lock; index assignment must not race.
    election = Election.load_for_update()

    if Candidate.objects.filter(identity=cleaned_identity).exists():
        raise InvalidInputError("Invalid identity: a candidate with this identity is already registered")

    last_index = Candidate.objects.aggregate(last=Max("index"))["last"]
    next_index = 0 if last_index is None else int(last_index) + 1

    candidate = Candidate.objects.create(
        index=next_index,
        name=cleaned_name,
        age=cleaned_age,
        party=cleaned_party,
        identity=cleaned_identity,
    )

    record_event(
        election=election,
        event_type="candidate_registered",
        actor=caller or cleaned_identity,
        payload={
            "index": candidate.index,
            "name": candidate.name,
            "party": candidate.party,
            "identity": candidate.identity,
        },
    )
    return candidate


@transaction.atomic
def approve_candidate(*, authority: AdminAuthority, caller: str, index: object) -> Candidate:
    """Flip the approval flag. Approving an approved candidate changes nothing."""
    authority.require(caller=caller, action="approve candidates")

    try:
        candidate_index = int(str(index).strip())
    except (TypeError, ValueError, OverflowError):
        raise NotFoundError(f"No candidate with index {index!r}") from None

    election = Election.load_for_update()
    try:
        candidate = Candidate.objects.select_for_update().get(index=candidate_index)
    except Candidate.DoesNotExist as exc:
        raise NotFoundError(f"No candidate with index {candidate_index}") from exc

    if candidate.is_approved:
        return candidate

    candidate.is_approved = True
    candidate.approved_at = timezone.now()
    candidate.save(update_fields=["is_approved", "approved_at"])

    record_event(
        election=election,
        event_type="candidate_approved",
        actor=caller,
        payload={"index": candidate.index, "name": candidate.name},
    )
    return candidate


def list_candidates() -> list[Candidate]:
    """All candidates in index order, approved or not."""
    return list(Candidate.objects.order_by("index"))


def candidate_standings() -> list[Candidate]:
    """All candidates, most votes first; equal counts keep index order."""
    return list(Candidate.objects.order_by("-votes", "index"))
