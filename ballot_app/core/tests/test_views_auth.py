from __future__ import annotations

import json
from io import StringIO
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import Client, TestCase, override_settings
from django.urls import reverse

from core.models import Election
from core.tests.utils_test_data import ADMIN, identity

PASSWORD = "correct horse battery staple"


def _mixed_case(principal: str) -> str:
    return "0x" + principal[2:].upper()


def _password_env(value: str):
    return patch.dict("os.environ", {"ELECTION_PRINCIPAL_PASSWORD": value})


@override_settings(ELECTION_ADMIN_PRINCIPAL=ADMIN)
class SessionLoginTests(TestCase):
    def setUp(self) -> None:
        get_user_model().objects.create_user(username=ADMIN, password=PASSWORD)
        self.client = Client(enforce_csrf_checks=True)

    def _csrf(self) -> str:
        return self.client.cookies["csrftoken"].value

    def _post(self, name: str, data: dict[str, object] | None = None, *, csrf: bool = True):
        headers = {"X-CSRFToken": self._csrf()} if csrf else {}
        return self.client.post(
            reverse(name),
            data=json.dumps(data or {}),
            content_type="application/json",
            headers=headers,
        )

    def _fetch_csrf_cookie(self) -> None:
        resp = self.client.get(reverse("election-csrf"))
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["csrf_token"])
        self.assertIn("csrftoken", self.client.cookies)

    def test_login_then_admin_command_with_csrf_enforced(self) -> None:
        self._fetch_csrf_cookie()

        resp = self._post("election-login", {"username": _mixed_case(ADMIN), "password": PASSWORD})
        self.assertEqual(resp.status_code, 200, resp.content)
        self.assertEqual(resp.json()["principal"], ADMIN)

        # Login rotates the token; the client picks up the new cookie.
        resp = self._post("election-create", {"name": "Campus2025"})
        self.assertEqual(resp.status_code, 201, resp.content)
        self.assertEqual(Election.load().name, "Campus2025")

        resp = self._post("election-logout")
        self.assertEqual(resp.status_code, 200)
        resp = self._post("election-start")
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()["code"], "Unauthorized")

    def test_post_without_csrf_token_is_rejected(self) -> None:
        self._fetch_csrf_cookie()

        resp = self._post("election-login", {"username": ADMIN, "password": PASSWORD}, csrf=False)
        self.assertEqual(resp.status_code, 403)
        self.assertNotIn("_auth_user_id", self.client.session)

    def test_wrong_password_is_rejected(self) -> None:
        self._fetch_csrf_cookie()

        resp = self._post("election-login", {"username": ADMIN, "password": "nope"})
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()["code"], "Unauthorized")

        resp = self._post("election-create", {"name": "Campus2025"})
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(Election.load().status, Election.Status.not_created)

    def test_form_encoded_login(self) -> None:
        self._fetch_csrf_cookie()

        resp = self.client.post(
            reverse("election-login"),
            data={"username": ADMIN, "password": PASSWORD},
            headers={"X-CSRFToken": self._csrf()},
        )
        self.assertEqual(resp.status_code, 200, resp.content)

    def test_login_rejects_get(self) -> None:
        resp = self.client.get(reverse("election-login"))
        self.assertEqual(resp.status_code, 405)


class PrincipalCommandTests(TestCase):
    def test_creates_and_updates_principal(self) -> None:
        principal = identity(7)
        with _password_env("first-password"):
            call_command("election_principal", _mixed_case(principal), stdout=StringIO())
        user = get_user_model().objects.get(username=principal)
        self.assertTrue(user.check_password("first-password"))

        with _password_env("second-password"):
            out = StringIO()
            call_command("election_principal", principal, stdout=out)
        self.assertIn("Updated principal", out.getvalue())
        user.refresh_from_db()
        self.assertTrue(user.check_password("second-password"))
        self.assertEqual(get_user_model().objects.filter(username=principal).count(), 1)

    def test_rejects_malformed_identity(self) -> None:
        with _password_env("pw"), self.assertRaises(CommandError):
            call_command("election_principal", "not-an-address", stdout=StringIO())

    def test_requires_password(self) -> None:
        with _password_env(""), self.assertRaises(CommandError):
            call_command("election_principal", identity(8), stdout=StringIO())
        self.assertFalse(get_user_model().objects.filter(username=identity(8)).exists())
