"""Session sign-in for API callers.

A caller's principal is the username of the Django user it signs in as.
Clients fetch a CSRF token first and send it back in the ``X-CSRFToken``
header on every POST, including the login itself.
"""

import logging
from typing import override

from django.contrib.auth import login as auth_login
from django.contrib.auth import logout as auth_logout
from django.contrib.auth import views as auth_views
from django.http import HttpRequest, HttpResponse, JsonResponse
from django.middleware.csrf import get_token
from django.views.decorators.csrf import ensure_csrf_cookie
from django.views.decorators.http import require_GET, require_POST

from core.views_elections._helpers import error_response, get_caller, parse_payload

logger = logging.getLogger(__name__)


@require_GET
@ensure_csrf_cookie
def csrf_token(request: HttpRequest) -> JsonResponse:
    return JsonResponse({"ok": True, "csrf_token": get_token(request)})


class PrincipalLoginView(auth_views.LoginView):
    """LoginView answering in JSON; accepts form-encoded or JSON credentials."""

    http_method_names = ["post", "options"]

    @override
    def post(self, request: HttpRequest, *args, **kwargs) -> HttpResponse:
        try:
            return super().post(request, *args, **kwargs)
        except ValueError as exc:
            return error_response(exc)

    @override
    def get_form_kwargs(self) -> dict[str, object]:
        kwargs = super().get_form_kwargs()
        data = parse_payload(self.request)
        kwargs["data"] = {
            # Principals are stored lower-cased.
            "username": str(data.get("username") or "").strip().lower(),
            "password": str(data.get("password") or ""),
        }
        return kwargs

    @override
    def form_valid(self, form) -> HttpResponse:
        user = form.get_user()
        auth_login(self.request, user)
        logger.info("Session login principal=%s", user.get_username())
        return JsonResponse({"ok": True, "principal": user.get_username(), "csrf_token": get_token(self.request)})

    @override
    def form_invalid(self, form) -> HttpResponse:
        logger.warning("Session login rejected principal=%s", form.data.get("username", ""))
        return JsonResponse(
            {"ok": False, "error": "Invalid principal or password.", "code": "Unauthorized"},
            status=403,
        )


@require_POST
def session_logout(request: HttpRequest) -> JsonResponse:
    principal = get_caller(request)
    auth_logout(request)
    if principal:
        logger.info("Session logout principal=%s", principal)
    return JsonResponse({"ok": True})
