"""Shared private helpers used across election view sub-modules."""

import json
from collections.abc import Callable
from functools import wraps

from django.http import HttpRequest, HttpResponse, JsonResponse

from core.elections_errors import (
    ElectionError,
    ElectionSystemFault,
    InvalidInputError,
    NotFoundError,
    UnauthorizedError,
)
from core.elections_services import ElectionSystem
from core.elections_tally import WinnerResult
from core.models import Candidate

_STATUS_BY_ERROR: dict[type[ElectionError], int] = {
    InvalidInputError: 400,
    UnauthorizedError: 403,
    NotFoundError: 404,
}


def get_election_system() -> ElectionSystem:
    return ElectionSystem()


def get_caller(request: HttpRequest) -> str:
    """The authenticated principal, or "" for anonymous requests."""
    user = getattr(request, "user", None)
    if user is None or not user.is_authenticated:
        return ""
    return str(user.get_username() or "").strip()


def parse_payload(request: HttpRequest) -> dict[str, object]:
    if request.content_type and request.content_type.startswith("application/json"):
        raw = request.body.decode("utf-8") if request.body else "{}"
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("JSON body must be an object")
        return {str(k): v for k, v in data.items()}
    return {str(k): request.POST.get(k) for k in request.POST}


def error_response(exc: Exception) -> JsonResponse:
    if isinstance(exc, ElectionSystemFault):
        return JsonResponse({"ok": False, "error": "Election storage is unavailable.", "code": "SystemFault"}, status=503)
    if isinstance(exc, ElectionError):
        status = 409
        for error_type, error_status in _STATUS_BY_ERROR.items():
            if isinstance(exc, error_type):
                status = error_status
                break
        return JsonResponse({"ok": False, "error": str(exc), "code": exc.code}, status=status)
    return JsonResponse({"ok": False, "error": str(exc), "code": "ValidationError"}, status=400)


def election_json_view(view_func: Callable[..., JsonResponse]) -> Callable[..., HttpResponse]:
    """Translate election errors and malformed bodies into JSON error responses."""

    @wraps(view_func)
    def wrapper(request: HttpRequest, *args: object, **kwargs: object) -> HttpResponse:
        try:
            return view_func(request, *args, **kwargs)
        except (ElectionError, ElectionSystemFault, ValueError) as exc:
            return error_response(exc)

    return wrapper


def require_caller(request: HttpRequest) -> str:
    caller = get_caller(request)
    if not caller:
        raise UnauthorizedError("Authentication required.")
    return caller


def candidate_json(candidate: Candidate) -> dict[str, object]:
    return {
        "index": candidate.index,
        "name": candidate.name,
        "age": candidate.age,
        "party": candidate.party,
        "identity": candidate.identity,
        "is_approved": candidate.is_approved,
        "votes": candidate.votes,
    }


def winner_json(winner: WinnerResult) -> dict[str, object]:
    return {
        "name": winner.name,
        "party": winner.party,
        "votes": winner.votes,
        "index": winner.index,
        "has_winner": winner.has_winner,
    }
