# returns/services/exceptions.py

"""
RETURNS SERVICE ERRORS

Centralized domain errors for the returns workflow.

Creation-time invariant violations are raised as Django's own
ValidationError (with error codes) so callers can treat them the same
way as model validation.
"""


class ReturnsServiceError(Exception):
    """Base exception for all returns workflow failures."""


class NumberGenerationExhaustedError(ReturnsServiceError):
    """Raised when no free RA/RI/CR number was found within the retry budget."""


class AuthorizationNumberCollisionError(ReturnsServiceError):
    """
    Raised when the database unique constraint rejects a generated
    authorization number at commit time. Safe to retry the creation.
    """

    retryable = True


class TransitionRejectedError(ReturnsServiceError):
    """Raised when an authorization lifecycle transition is not allowed."""


class InvalidReturnItemTransitionError(ReturnsServiceError):
    """Raised when a return item cannot move to the requested reception state."""


class ReimbursementCreationFailed(ReturnsServiceError):
    """
    Raised when the expedited exchange reimbursement fails validation.

    Fatal: aborts (rolls back) the authorization save that triggered it.
    `errors` carries the reimbursement's field errors.
    """

    def __init__(self, message, *, authorization=None, errors=None):
        super().__init__(message)
        self.authorization = authorization
        self.errors = dict(errors or {})
