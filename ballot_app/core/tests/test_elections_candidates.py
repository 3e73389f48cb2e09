from __future__ import annotations

from django.test import TestCase

from core.elections_errors import InvalidInputError, NotFoundError, UnauthorizedError
from core.models import AuditLogEntry, Candidate
from core.tests.utils_test_data import ADMIN, identity, make_system, register_candidates


class CandidateLedgerTests(TestCase):
    def setUp(self) -> None:
        self.system = make_system()

    def test_registration_assigns_sequential_indexes_before_election_exists(self) -> None:
        alice, bob, carol = register_candidates(self.system, ["Alice", "Bob", "Carol"])

        self.assertEqual([alice.index, bob.index, carol.index], [0, 1, 2])
        for candidate in (alice, bob, carol):
            self.assertFalse(candidate.is_approved)
            self.assertEqual(candidate.votes, 0)

    def test_get_candidates_returns_index_order_including_unapproved(self) -> None:
        register_candidates(self.system, ["Alice", "Bob", "Carol"])
        self.system.approve_candidate(caller=ADMIN, index=1)

        candidates = self.system.get_candidates()
        self.assertEqual([c.name for c in candidates], ["Alice", "Bob", "Carol"])
        self.assertEqual([c.is_approved for c in candidates], [False, True, False])
        self.assertEqual([c.index for c in self.system.get_all_candidates()], [0, 1, 2])

    def test_registration_validates_input(self) -> None:
        bad_inputs = [
            {"name": "", "age": 40, "party": "P", "identity": identity(1)},
            {"name": "Alice", "age": 0, "party": "P", "identity": identity(1)},
            {"name": "Alice", "age": -3, "party": "P", "identity": identity(1)},
            {"name": "Alice", "age": "forty", "party": "P", "identity": identity(1)},
            {"name": "Alice", "age": 40, "party": "P", "identity": "not-an-address"},
            {"name": "Alice", "age": 40, "party": "P", "identity": "0x123"},
        ]
        for kwargs in bad_inputs:
            with self.subTest(kwargs=kwargs):
                with self.assertRaises(InvalidInputError):
                    self.system.register_candidate(**kwargs)
        self.assertEqual(Candidate.objects.count(), 0)

    def test_identity_is_stored_lower_case(self) -> None:
        mixed = "0x" + "AbCdEf" * 6 + "0123"
        candidate = self.system.register_candidate(name="Alice", age=40, party="P", identity=mixed)
        self.assertEqual(candidate.identity, mixed.lower())

    def test_duplicate_identity_is_rejected(self) -> None:
        self.system.register_candidate(name="Alice", age=40, party="P", identity=identity(1))
        with self.assertRaises(InvalidInputError):
            self.system.register_candidate(name="Alice again", age=41, party="Q", identity=identity(1).upper().replace("0X", "0x"))
        self.assertEqual(Candidate.objects.count(), 1)

    def test_approve_is_idempotent(self) -> None:
        register_candidates(self.system, ["Alice"])

        first = self.system.approve_candidate(caller=ADMIN, index=0)
        snapshot = (first.is_approved, first.approved_at, first.votes)
        second = self.system.approve_candidate(caller=ADMIN, index=0)

        self.assertEqual((second.is_approved, second.approved_at, second.votes), snapshot)
        self.assertEqual(AuditLogEntry.objects.filter(event_type="candidate_approved").count(), 1)

    def test_approve_unknown_index_fails_not_found(self) -> None:
        register_candidates(self.system, ["Alice"])
        for index in (1, -1, "x"):
            with self.subTest(index=index):
                with self.assertRaises(NotFoundError):
                    self.system.approve_candidate(caller=ADMIN, index=index)

    def test_approve_requires_admin(self) -> None:
        alice = register_candidates(self.system, ["Alice"])[0]
        with self.assertRaises(UnauthorizedError):
            self.system.approve_candidate(caller=alice.identity, index=0)
        alice.refresh_from_db()
        self.assertFalse(alice.is_approved)

    def test_standings_order_by_votes_then_index(self) -> None:
        register_candidates(self.system, ["Alice", "Bob", "Carol"])
        for index in (0, 1, 2):
            self.system.approve_candidate(caller=ADMIN, index=index)
        Candidate.objects.filter(index=0).update(votes=2)
        Candidate.objects.filter(index=1).update(votes=5)
        Candidate.objects.filter(index=2).update(votes=2)

        self.assertEqual([c.name for c in self.system.get_standings()], ["Bob", "Alice", "Carol"])
