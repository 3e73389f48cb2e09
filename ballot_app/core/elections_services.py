"""Command/query surface consumed by the presentation layer.

``ElectionSystem`` composes the registry, candidate ledger, voter directory
and tally engine. The caller's principal is passed to every command; nothing
about the caller is held between calls.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import wraps
from typing import Concatenate, ParamSpec, TypeVar

from django.db import DatabaseError

from core import (
    elections_audit,
    elections_candidates,
    elections_registry,
    elections_tally,
    elections_voters,
)
from core.elections_authority import AdminAuthority
from core.elections_errors import ElectionSystemFault
from core.elections_registry import ElectionStatus
from core.elections_tally import VoteReceipt, WinnerResult
from core.elections_voters import VoteRecord, VoterDetails
from core.models import Candidate, Election, Voter

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def _surface_storage_faults(
    method: Callable[Concatenate[ElectionSystem, P], R],
) -> Callable[Concatenate[ElectionSystem, P], R]:
    @wraps(method)
    def wrapper(self: ElectionSystem, *args: P.args, **kwargs: P.kwargs) -> R:
        try:
            return method(self, *args, **kwargs)
        except DatabaseError as exc:
            logger.exception("Election storage failure during %s", method.__name__)
            raise ElectionSystemFault(
                f"Election storage failure during {method.__name__}: {exc}. "
                "The operation was not applied; verify database connectivity and retry."
            ) from exc

    return wrapper


class ElectionSystem:
    def __init__(self, *, authority: AdminAuthority | None = None) -> None:
        self.authority = authority if authority is not None else AdminAuthority.from_settings()

    # Election registry

    @_surface_storage_faults
    def create_election(self, *, caller: str, name: str) -> Election:
        return elections_registry.create_election(authority=self.authority, caller=caller, name=name)

    @_surface_storage_faults
    def start_election(self, *, caller: str) -> Election:
        return elections_registry.start_election(authority=self.authority, caller=caller)

    @_surface_storage_faults
    def end_election(self, *, caller: str) -> Election:
        return elections_registry.end_election(authority=self.authority, caller=caller)

    @_surface_storage_faults
    def delete_election(self, *, caller: str) -> Election:
        return elections_registry.delete_election(authority=self.authority, caller=caller)

    @_surface_storage_faults
    def get_election_status(self) -> ElectionStatus:
        return elections_registry.election_status()

    # Candidate ledger

    @_surface_storage_faults
    def register_candidate(
        self,
        *,
        name: str,
        age: object,
        party: str,
        identity: str,
        caller: str | None = None,
    ) -> Candidate:
        return elections_candidates.register_candidate(
            name=name,
            age=age,
            party=party,
            identity=identity,
            caller=caller,
        )

    @_surface_storage_faults
    def approve_candidate(self, *, caller: str, index: object) -> Candidate:
        return elections_candidates.approve_candidate(authority=self.authority, caller=caller, index=index)

    @_surface_storage_faults
    def get_candidates(self) -> list[Candidate]:
        return elections_candidates.list_candidates()

    get_all_candidates = get_candidates

    @_surface_storage_faults
    def get_standings(self) -> list[Candidate]:
        return elections_candidates.candidate_standings()

    # Voter directory

    @_surface_storage_faults
    def register_voter(self, *, name: str, age: object, identity: str) -> Voter:
        return elections_voters.register_voter(name=name, age=age, identity=identity)

    @_surface_storage_faults
    def login_voter(self, *, caller: str, name: str, identity: str) -> Voter:
        return elections_voters.login_voter(caller=caller, name=name, identity=identity)

    @_surface_storage_faults
    def logout_voter(self, *, caller: str, identity: str) -> Voter:
        return elections_voters.logout_voter(caller=caller, identity=identity)

    @_surface_storage_faults
    def is_voter_logged_in(self, identity: str) -> bool:
        return elections_voters.is_voter_logged_in(identity)

    @_surface_storage_faults
    def get_voter_details(self, identity: str) -> VoterDetails:
        return elections_voters.voter_details(identity)

    @_surface_storage_faults
    def has_voted(self, identity: str) -> bool:
        return elections_voters.has_voted(identity)

    @_surface_storage_faults
    def get_voter_ballot(self, *, caller: str, identity: str) -> VoteRecord | None:
        return elections_voters.voter_ballot(authority=self.authority, caller=caller, identity=identity)

    # Tally

    @_surface_storage_faults
    def vote(self, *, caller: str, candidate_index: object) -> VoteReceipt:
        return elections_tally.cast_vote(caller=caller, candidate_index=candidate_index)

    @_surface_storage_faults
    def get_winner(self) -> WinnerResult:
        return elections_tally.compute_winner()

    @_surface_storage_faults
    def get_tally_summary(self) -> dict[str, int]:
        return elections_tally.tally_summary()

    # Audit

    @_surface_storage_faults
    def build_audit_export(self, *, include_private: bool = False) -> dict[str, object]:
        return elections_audit.build_audit_export(include_private=include_private)
