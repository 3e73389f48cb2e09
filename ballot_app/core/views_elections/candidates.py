from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_GET, require_POST

from core.views_elections._helpers import (
    candidate_json,
    election_json_view,
    get_caller,
    get_election_system,
    parse_payload,
    require_caller,
)


@require_POST
@election_json_view
def candidate_register(request: HttpRequest) -> JsonResponse:
    data = parse_payload(request)
    candidate = get_election_system().register_candidate(
        name=str(data.get("name") or ""),
        age=data.get("age"),
        party=str(data.get("party") or ""),
        identity=str(data.get("identity") or ""),
        caller=get_caller(request) or None,
    )
    return JsonResponse({"ok": True, "candidate": candidate_json(candidate)}, status=201)


@require_POST
@election_json_view
def candidate_approve(request: HttpRequest, index: int) -> JsonResponse:
    candidate = get_election_system().approve_candidate(caller=require_caller(request), index=index)
    return JsonResponse({"ok": True, "candidate": candidate_json(candidate)})


@require_GET
@election_json_view
def candidate_list(request: HttpRequest) -> JsonResponse:
    candidates = get_election_system().get_candidates()
    return JsonResponse({"ok": True, "candidates": [candidate_json(c) for c in candidates]})


@require_GET
@election_json_view
def candidate_standings(request: HttpRequest) -> JsonResponse:
    system = get_election_system()
    candidates = system.get_standings()
    return JsonResponse(
        {
            "ok": True,
            "standings": [candidate_json(c) for c in candidates],
            "totals": system.get_tally_summary(),
        }
    )
