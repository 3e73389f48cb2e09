from django.urls import path

from core import views_auth, views_elections

urlpatterns = [
    path("session/csrf/", views_auth.csrf_token, name="election-csrf"),
    path("session/login/", views_auth.PrincipalLoginView.as_view(), name="election-login"),
    path("session/logout/", views_auth.session_logout, name="election-logout"),
    path("", views_elections.election_status, name="election-status"),
    path("create/", views_elections.election_create, name="election-create"),
    path("start/", views_elections.election_start, name="election-start"),
    path("end/", views_elections.election_end, name="election-end"),
    path("delete/", views_elections.election_delete, name="election-delete"),
    path("candidates/", views_elections.candidate_list, name="election-candidates"),
    path("candidates/register/", views_elections.candidate_register, name="election-candidate-register"),
    path("candidates/<int:index>/approve/", views_elections.candidate_approve, name="election-candidate-approve"),
    path("standings/", views_elections.candidate_standings, name="election-standings"),
    path("voters/register/", views_elections.voter_register, name="election-voter-register"),
    path("voters/login/", views_elections.voter_login, name="election-voter-login"),
    path("voters/logout/", views_elections.voter_logout, name="election-voter-logout"),
    path("voters/<str:identity>/", views_elections.voter_details, name="election-voter-details"),
    path("voters/<str:identity>/logged-in/", views_elections.voter_logged_in, name="election-voter-logged-in"),
    path("voters/<str:identity>/has-voted/", views_elections.voter_has_voted, name="election-voter-has-voted"),
    path("voters/<str:identity>/ballot/", views_elections.voter_ballot, name="election-voter-ballot"),
    path("vote/", views_elections.election_vote_submit, name="election-vote-submit"),
    path("winner/", views_elections.election_winner, name="election-winner"),
]
