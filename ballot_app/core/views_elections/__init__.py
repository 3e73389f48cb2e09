from core.views_elections.candidates import (
    candidate_approve,
    candidate_list,
    candidate_register,
    candidate_standings,
)
from core.views_elections.lifecycle import (
    election_create,
    election_delete,
    election_end,
    election_start,
    election_status,
)
from core.views_elections.vote import election_vote_submit, election_winner
from core.views_elections.voters import (
    voter_ballot,
    voter_details,
    voter_has_voted,
    voter_logged_in,
    voter_login,
    voter_logout,
    voter_register,
)

__all__ = [
    "candidate_approve",
    "candidate_list",
    "candidate_register",
    "candidate_standings",
    "election_create",
    "election_delete",
    "election_end",
    "election_start",
    "election_status",
    "election_vote_submit",
    "election_winner",
    "voter_ballot",
    "voter_details",
    "voter_has_voted",
    "voter_logged_in",
    "voter_login",
    "voter_logout",
    "voter_register",
]
