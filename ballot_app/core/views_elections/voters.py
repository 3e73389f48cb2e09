"""Voter registration, session commands and voter queries."""

from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_GET, require_POST

from core.views_elections._helpers import election_json_view, get_election_system, parse_payload, require_caller


@require_POST
@election_json_view
def voter_register(request: HttpRequest) -> JsonResponse:
    data = parse_payload(request)
    voter = get_election_system().register_voter(
        name=str(data.get("name") or ""),
        age=data.get("age"),
        identity=str(data.get("identity") or ""),
    )
    return JsonResponse({"ok": True, "identity": voter.identity, "name": voter.name}, status=201)


@require_POST
@election_json_view
def voter_login(request: HttpRequest) -> JsonResponse:
    caller = require_caller(request)
    data = parse_payload(request)
    voter = get_election_system().login_voter(
        caller=caller,
        name=str(data.get("name") or ""),
        identity=str(data.get("identity") or caller),
    )
    return JsonResponse({"ok": True, "identity": voter.identity, "is_logged_in": voter.session_active})


@require_POST
@election_json_view
def voter_logout(request: HttpRequest) -> JsonResponse:
    caller = require_caller(request)
    data = parse_payload(request)
    voter = get_election_system().logout_voter(caller=caller, identity=str(data.get("identity") or caller))
    return JsonResponse({"ok": True, "identity": voter.identity, "is_logged_in": voter.session_active})


@require_GET
@election_json_view
def voter_details(request: HttpRequest, identity: str) -> JsonResponse:
    details = get_election_system().get_voter_details(identity)
    return JsonResponse(
        {
            "ok": True,
            "identity": details.identity,
            "name": details.name,
            "age": details.age,
            "is_registered": details.is_registered,
            "is_logged_in": details.is_logged_in,
            "has_voted": details.has_voted,
        }
    )


@require_GET
@election_json_view
def voter_logged_in(request: HttpRequest, identity: str) -> JsonResponse:
    return JsonResponse({"ok": True, "is_logged_in": get_election_system().is_voter_logged_in(identity)})


@require_GET
@election_json_view
def voter_has_voted(request: HttpRequest, identity: str) -> JsonResponse:
    return JsonResponse({"ok": True, "has_voted": get_election_system().has_voted(identity)})


@require_GET
@election_json_view
def voter_ballot(request: HttpRequest, identity: str) -> JsonResponse:
    record = get_election_system().get_voter_ballot(caller=require_caller(request), identity=identity)
    if record is None:
        return JsonResponse({"ok": True, "has_voted": False, "candidate_index": None, "voted_at": None})
    return JsonResponse(
        {
            "ok": True,
            "has_voted": True,
            "candidate_index": record.candidate_index,
            "voted_at": record.voted_at.isoformat() if record.voted_at else None,
        }
    )
