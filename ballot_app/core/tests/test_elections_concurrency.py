from __future__ import annotations

import threading
from collections import Counter

from django.db import connection
from django.test import TransactionTestCase

from core.elections_errors import ElectionError, ElectionSystemFault
from core.models import Candidate, Election, Voter
from core.tests.utils_test_data import logged_in_voter, make_system, running_election


class ConcurrentVoteTests(TransactionTestCase):
    """Racing ``vote`` calls against the real row locks.

    Each thread opens its own database connection, so these run on the
    file-backed test database configured in settings.
    """

    def setUp(self) -> None:
        # TransactionTestCase empties tables between tests, including the
        # row created by migration.
        Election.objects.get_or_create(pk=Election.SINGLETON_PK)
        self.system = make_system()
        running_election(self.system, ["Alice", "Bob"])

    def _race(self, attempts: list[tuple[str, int]]) -> Counter[str]:
        barrier = threading.Barrier(len(attempts))
        outcomes: Counter[str] = Counter()
        outcomes_lock = threading.Lock()

        def attempt(caller: str, candidate_index: int) -> None:
            try:
                barrier.wait()
                try:
                    self.system.vote(caller=caller, candidate_index=candidate_index)
                    outcome = "ok"
                except ElectionError as exc:
                    outcome = exc.code
                except ElectionSystemFault:
                    outcome = "SystemFault"
                with outcomes_lock:
                    outcomes[outcome] += 1
            finally:
                connection.close()

        threads = [threading.Thread(target=attempt, args=args) for args in attempts]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=60)
        self.assertFalse(any(thread.is_alive() for thread in threads))
        return outcomes

    def _votes(self) -> list[int]:
        return list(Candidate.objects.order_by("index").values_list("votes", flat=True))

    def test_one_voter_racing_counts_once(self) -> None:
        voter = logged_in_voter(self.system, 1)

        outcomes = self._race([(voter, n % 2) for n in range(8)])

        self.assertEqual(outcomes, Counter({"ok": 1, "AlreadyVoted": 7}))
        self.assertEqual(sum(self._votes()), 1)
        record = Voter.objects.get(identity=voter)
        self.assertTrue(record.has_voted)
        self.assertEqual(self._votes()[record.voted_candidate_index], 1)

    def test_many_voters_racing_twice_each(self) -> None:
        voters = [logged_in_voter(self.system, n) for n in range(1, 13)]

        outcomes = self._race([(voter, 0) for voter in voters] + [(voter, 1) for voter in voters])

        self.assertEqual(outcomes, Counter({"ok": 12, "AlreadyVoted": 12}))
        self.assertEqual(sum(self._votes()), 12)
        self.assertEqual(Voter.objects.filter(has_voted=True).count(), 12)
        summary = self.system.get_tally_summary()
        self.assertEqual(summary["total_votes"], summary["voters_voted"])
