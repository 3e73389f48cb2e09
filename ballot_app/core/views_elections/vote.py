"""Vote submission and winner query."""

from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_GET, require_POST

from core.views_elections._helpers import (
    election_json_view,
    get_election_system,
    parse_payload,
    require_caller,
    winner_json,
)


@require_POST
@election_json_view
def election_vote_submit(request: HttpRequest) -> JsonResponse:
    caller = require_caller(request)
    data = parse_payload(request)
    if data.get("candidate_index") is None:
        raise ValueError("candidate_index is required")

    receipt = get_election_system().vote(caller=caller, candidate_index=data.get("candidate_index"))
    return JsonResponse(
        {
            "ok": True,
            "identity": receipt.identity,
            "candidate_index": receipt.candidate_index,
            "cast_at": receipt.cast_at.isoformat(),
        }
    )


@require_GET
@election_json_view
def election_winner(request: HttpRequest) -> JsonResponse:
    return JsonResponse({"ok": True, "winner": winner_json(get_election_system().get_winner())})
