from __future__ import annotations

import io
import json
from unittest.mock import patch

from django.core.management import call_command
from django.db import OperationalError
from django.test import TestCase

from core.elections_errors import ElectionError, ElectionSystemFault
from core.elections_signals import election_state_changed
from core.tests.utils_test_data import ADMIN, logged_in_voter, make_system, running_election


class AuditExportTests(TestCase):
    def setUp(self) -> None:
        self.system = make_system()
        running_election(self.system, ["Alice", "Bob"])
        voter = logged_in_voter(self.system, 1)
        self.system.vote(caller=voter, candidate_index=1)

    def test_public_export_hides_votes_and_sessions(self) -> None:
        export = self.system.build_audit_export()

        self.assertEqual(export["election"]["name"], "Test election")
        self.assertEqual(export["election"]["status"], "active")
        self.assertEqual([c["votes"] for c in export["candidates"]], [0, 1])

        event_types = [e["event_type"] for e in export["audit_log"]]
        self.assertIn("election_created", event_types)
        self.assertIn("candidate_approved", event_types)
        self.assertNotIn("vote_cast", event_types)
        self.assertNotIn("voter_logged_in", event_types)

    def test_private_export_includes_votes(self) -> None:
        export = self.system.build_audit_export(include_private=True)
        votes = [e for e in export["audit_log"] if e["event_type"] == "vote_cast"]
        self.assertEqual(len(votes), 1)
        self.assertEqual(votes[0]["payload"]["candidate_index"], 1)

    def test_management_command_prints_json(self) -> None:
        out = io.StringIO()
        call_command("election_audit_export", "--include-private", "--indent", "0", stdout=out)

        export = json.loads(out.getvalue())
        self.assertEqual(export["election"]["name"], "Test election")
        self.assertIn("vote_cast", [e["event_type"] for e in export["audit_log"]])


class ChangeNotificationTests(TestCase):
    def test_signal_sent_after_commit(self) -> None:
        system = make_system()
        received: list[tuple[str, dict[str, object]]] = []

        def _receiver(sender: object, event_type: str, payload: dict[str, object], **kwargs: object) -> None:
            received.append((event_type, payload))

        election_state_changed.connect(_receiver)
        self.addCleanup(election_state_changed.disconnect, _receiver)

        with self.captureOnCommitCallbacks(execute=True):
            system.create_election(caller=ADMIN, name="Campus2025")

        self.assertEqual([event_type for event_type, _payload in received], ["election_created"])
        self.assertEqual(received[0][1]["name"], "Campus2025")

    def test_no_signal_for_rejected_operation(self) -> None:
        system = make_system()
        received: list[str] = []

        def _receiver(sender: object, event_type: str, **kwargs: object) -> None:
            received.append(event_type)

        election_state_changed.connect(_receiver)
        self.addCleanup(election_state_changed.disconnect, _receiver)

        with self.captureOnCommitCallbacks(execute=True):
            with self.assertRaises(ElectionError):
                system.start_election(caller=ADMIN)

        self.assertEqual(received, [])


class StorageFaultTests(TestCase):
    def test_database_errors_surface_as_system_fault(self) -> None:
        system = make_system()
        with patch("core.elections_registry.Election.load", side_effect=OperationalError("disk I/O error")):
            with self.assertRaises(ElectionSystemFault) as ctx:
                system.get_election_status()

        self.assertNotIsInstance(ctx.exception, ElectionError)
        self.assertIsInstance(ctx.exception.__cause__, OperationalError)
