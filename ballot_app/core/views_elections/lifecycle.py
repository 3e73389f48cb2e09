"""Election lifecycle commands (admin only) and the status query."""

from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_GET, require_POST

from core.models import Election
from core.views_elections._helpers import election_json_view, get_election_system, parse_payload, require_caller


def _election_json(election: Election) -> dict[str, object]:
    return {
        "name": election.name,
        "status": str(election.status),
        "created_datetime": election.created_datetime.isoformat() if election.created_datetime else None,
        "started_datetime": election.started_datetime.isoformat() if election.started_datetime else None,
        "ended_datetime": election.ended_datetime.isoformat() if election.ended_datetime else None,
    }


@require_POST
@election_json_view
def election_create(request: HttpRequest) -> JsonResponse:
    caller = require_caller(request)
    data = parse_payload(request)
    election = get_election_system().create_election(caller=caller, name=str(data.get("name") or ""))
    return JsonResponse({"ok": True, "election": _election_json(election)}, status=201)


@require_POST
@election_json_view
def election_start(request: HttpRequest) -> JsonResponse:
    election = get_election_system().start_election(caller=require_caller(request))
    return JsonResponse({"ok": True, "election": _election_json(election)})


@require_POST
@election_json_view
def election_end(request: HttpRequest) -> JsonResponse:
    election = get_election_system().end_election(caller=require_caller(request))
    return JsonResponse({"ok": True, "election": _election_json(election)})


@require_POST
@election_json_view
def election_delete(request: HttpRequest) -> JsonResponse:
    election = get_election_system().delete_election(caller=require_caller(request))
    return JsonResponse({"ok": True, "election": _election_json(election)})


@require_GET
@election_json_view
def election_status(request: HttpRequest) -> JsonResponse:
    status = get_election_system().get_election_status()
    return JsonResponse(
        {
            "ok": True,
            "name": status.name,
            "is_active": status.is_active,
            "has_ended": status.has_ended,
        }
    )
