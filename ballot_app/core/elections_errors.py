"""User-facing election errors.

Every rejection is raised before any write, so a caller that catches one of
these knows the store is unchanged.
"""


class ElectionError(Exception):
    code = "ElectionError"


class UnauthorizedError(ElectionError):
    code = "Unauthorized"


class InvalidStateError(ElectionError):
    code = "InvalidState"


class PreconditionFailedError(ElectionError):
    code = "PreconditionFailed"


class NotFoundError(ElectionError):
    code = "NotFound"


class AlreadyVotedError(ElectionError):
    code = "AlreadyVoted"


class ElectionNotActiveError(ElectionError):
    code = "ElectionNotActive"


class CandidateNotApprovedError(ElectionError):
    code = "CandidateNotApproved"


class InvalidInputError(ElectionError):
    # Malformed input: empty name, non-positive age, malformed identity.
    code = "ValidationError"


class ElectionSystemFault(Exception):
    """Storage-level failure. Not an ElectionError: callers must not treat it as a rejection."""
