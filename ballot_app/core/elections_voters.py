"""Voter registration and login sessions.

A voter is Unregistered (no row), Registered-LoggedOut or Registered-LoggedIn.
Only the identity owner may change their own session.
"""

from __future__ import annotations

import datetime
import hmac
import logging
from dataclasses import dataclass

from django.db import transaction
from django.utils import timezone

from core.elections_audit import record_event
from core.elections_authority import AdminAuthority
from core.elections_errors import InvalidStateError, NotFoundError, UnauthorizedError
from core.elections_validation import clean_age, clean_name, is_well_formed_identity, normalize_identity
from core.models import Election, Voter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VoterDetails:
    identity: str
    name: str
    age: int
    is_registered: bool
    is_logged_in: bool
    has_voted: bool


@dataclass(frozen=True)
class VoteRecord:
    identity: str
    candidate_index: int
    voted_at: datetime.datetime | None


def _require_owner(*, caller: str | None, identity: str, action: str) -> None:
    owner = str(caller or "").strip().lower()
    if not owner or not hmac.compare_digest(owner.encode("utf-8"), identity.encode("utf-8")):
        logger.warning("Voter session action rejected action=%s caller=%s identity=%s", action, caller or "-", identity)
        raise UnauthorizedError(f"Only the identity owner may {action}")


def _lookup_identity(identity: object) -> str | None:
    if not is_well_formed_identity(identity):
        return None
    return str(identity).strip().lower()


@transaction.atomic
def register_voter(*, name: str, age: object, identity: str) -> Voter:
    """Register a voter; re-registering an identity only refreshes the name.

    Session state and the has-voted latch are never touched by re-registration.
    """
    cleaned_name = clean_name(name)
    cleaned_age = clean_age(age)
    cleaned_identity = normalize_identity(identity)

    election = Election.load_for_update()

    voter = Voter.objects.select_for_update().filter(identity=cleaned_identity).first()
    if voter is not None:
        if voter.name != cleaned_name:
            voter.name = cleaned_name
            voter.save(update_fields=["name"])
            logger.info("Voter re-registered with new display name identity=%s", cleaned_identity)
        return voter

    voter = Voter.objects.create(identity=cleaned_identity, name=cleaned_name, age=cleaned_age)
    record_event(
        election=election,
        event_type="voter_registered",
        actor=cleaned_identity,
        payload={"identity": cleaned_identity, "name": cleaned_name},
    )
    return voter


@transaction.atomic
def login_voter(*, caller: str, name: str, identity: str) -> Voter:
    cleaned_identity = normalize_identity(identity)
    _require_owner(caller=caller, identity=cleaned_identity, action="log in")

    election = Election.load_for_update()
    voter = Voter.objects.select_for_update().filter(identity=cleaned_identity).first()
    if voter is None:
        raise UnauthorizedError("Identity is not registered as a voter")
    if voter.session_active:
        raise InvalidStateError("Voter already has an active session")

    display_name = str(name or "").strip()
    update_fields = ["session_active", "last_login_at"]
    if display_name and display_name != voter.name:
        voter.name = clean_name(display_name)
        update_fields.append("name")

    voter.session_active = True
    voter.last_login_at = timezone.now()
    voter.save(update_fields=update_fields)

    record_event(
        election=election,
        event_type="voter_logged_in",
        actor=cleaned_identity,
        payload={"identity": cleaned_identity},
        is_public=False,
    )
    return voter


@transaction.atomic
def logout_voter(*, caller: str, identity: str) -> Voter:
    """End the voter's session. Logging out twice is not an error."""
    cleaned_identity = normalize_identity(identity)
    _require_owner(caller=caller, identity=cleaned_identity, action="log out")

    election = Election.load_for_update()
    voter = Voter.objects.select_for_update().filter(identity=cleaned_identity).first()
    if voter is None:
        raise NotFoundError("Identity is not registered as a voter")
    if not voter.session_active:
        return voter

    voter.session_active = False
    voter.save(update_fields=["session_active"])

    record_event(
        election=election,
        event_type="voter_logged_out",
        actor=cleaned_identity,
        payload={"identity": cleaned_identity},
        is_public=False,
    )
    return voter


def is_voter_logged_in(identity: object) -> bool:
    lookup = _lookup_identity(identity)
    if lookup is None:
        return False
    return Voter.objects.filter(identity=lookup, session_active=True).exists()


def has_voted(identity: object) -> bool:
    lookup = _lookup_identity(identity)
    if lookup is None:
        return False
    return Voter.objects.filter(identity=lookup, has_voted=True).exists()


def voter_details(identity: object) -> VoterDetails:
    lookup = _lookup_identity(identity)
    voter = Voter.objects.filter(identity=lookup).first() if lookup is not None else None
    if voter is None:
        raise NotFoundError("Identity is not registered as a voter")
    return VoterDetails(
        identity=voter.identity,
        name=voter.name,
        age=int(voter.age),
        is_registered=voter.is_registered,
        is_logged_in=bool(voter.session_active),
        has_voted=bool(voter.has_voted),
    )


def voter_ballot(*, authority: AdminAuthority, caller: str, identity: object) -> VoteRecord | None:
    """Who the voter voted for, or None. Visible to the admin and to the voter."""
    lookup = _lookup_identity(identity)
    if lookup is None:
        raise NotFoundError("Identity is not registered as a voter")
    if not authority.is_admin(caller):
        _require_owner(caller=caller, identity=lookup, action="view this ballot")

    voter = Voter.objects.filter(identity=lookup).first()
    if voter is None:
        raise NotFoundError("Identity is not registered as a voter")
    if not voter.has_voted or voter.voted_candidate_index is None:
        return None
    return VoteRecord(
        identity=voter.identity,
        candidate_index=int(voter.voted_candidate_index),
        voted_at=voter.voted_at,
    )
