"""Election lifecycle: NotCreated/Deleted -> Created -> Active -> Ended -> Deleted."""

from __future__ import annotations

from dataclasses import dataclass

from django.db import transaction
from django.utils import timezone

from core.elections_audit import record_event
from core.elections_authority import AdminAuthority
from core.elections_errors import InvalidStateError, PreconditionFailedError
from core.elections_validation import clean_name
from core.models import Candidate, Election, Voter

_CREATABLE_STATES = frozenset({Election.Status.not_created, Election.Status.deleted})


@dataclass(frozen=True)
class ElectionStatus:
    name: str
    is_active: bool
    has_ended: bool


@transaction.atomic
def create_election(*, authority: AdminAuthority, caller: str, name: str) -> Election:
    authority.require(caller=caller, action="create an election")
    cleaned_name = clean_name(name, field_label="election name")

    election = Election.load_for_update()
    if election.status not in _CREATABLE_STATES:
        raise InvalidStateError(f"An election already exists (status: {election.get_status_display()})")

    election.name = cleaned_name
    election.status = Election.Status.created
    election.created_datetime = timezone.now()
    election.started_datetime = None
    election.ended_datetime = None
    election.deleted_datetime = None
    election.save()

    record_event(
        election=election,
        event_type="election_created",
        actor=caller,
        payload={"name": cleaned_name, "created_datetime": election.created_datetime.isoformat()},
    )
    return election


@transaction.atomic
def start_election(*, authority: AdminAuthority, caller: str) -> Election:
    authority.require(caller=caller, action="start the election")

    election = Election.load_for_update()
    if election.status != Election.Status.created:
        raise InvalidStateError(f"Election must be created to start (status: {election.get_status_display()})")

    election.status = Election.Status.active
    election.started_datetime = timezone.now()
    election.save(update_fields=["status", "started_datetime", "updated_at"])

    record_event(
        election=election,
        event_type="election_started",
        actor=caller,
        payload={"name": election.name, "started_datetime": election.started_datetime.isoformat()},
    )
    return election


@transaction.atomic
def end_election(*, authority: AdminAuthority, caller: str) -> Election:
    authority.require(caller=caller, action="end the election")

    election = Election.load_for_update()
    if election.status != Election.Status.active:
        raise InvalidStateError(f"Election must be active to end (status: {election.get_status_display()})")

    election.status = Election.Status.ended
    election.ended_datetime = timezone.now()
    election.save(update_fields=["status", "ended_datetime", "updated_at"])

    record_event(
        election=election,
        event_type="election_ended",
        actor=caller,
        payload={
            "name": election.name,
            "ended_datetime": election.ended_datetime.isoformat(),
            "total_votes": Voter.objects.filter(has_voted=True).count(),
        },
    )
    return election


@transaction.atomic
def delete_election(*, authority: AdminAuthority, caller: str) -> Election:
    """Clear all election-scoped state and return to a creatable state.

    Candidates are removed; voters stay registered but their vote latch,
    recorded ballot and session are reset.
    """
    authority.require(caller=caller, action="delete the election")

    election = Election.load_for_update()
    if election.status != Election.Status.ended:
        raise PreconditionFailedError(
            f"Election must be ended before it can be deleted (status: {election.get_status_display()})"
        )

    deleted_name = election.name
    candidates_removed, _ = Candidate.objects.all().delete()
    voters_reset = Voter.objects.filter(has_voted=True).update(
        has_voted=False,
        voted_candidate_index=None,
        voted_at=None,
    )
    Voter.objects.filter(session_active=True).update(session_active=False)

    election.name = ""
    election.status = Election.Status.deleted
    election.deleted_datetime = timezone.now()
    election.save(update_fields=["name", "status", "deleted_datetime", "updated_at"])

    record_event(
        election=election,
        event_type="election_deleted",
        actor=caller,
        payload={
            "name": deleted_name,
            "candidates_removed": candidates_removed,
            "voters_reset": voters_reset,
        },
    )
    return election


def election_status() -> ElectionStatus:
    election = Election.load()
    return ElectionStatus(
        name=str(election.name or ""),
        is_active=election.is_active,
        has_ended=election.has_ended,
    )
