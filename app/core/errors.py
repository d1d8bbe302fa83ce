# app/core/errors.py
"""
Application error taxonomy.

Services raise these; the handlers registered in app.main render every one of
them as the uniform envelope ``{"success": false, "message": ..., "error": ...}``.
``message`` is the human-readable contract, ``error`` is a debug aid only.
"""
from typing import Any, Optional


class AppError(Exception):
    status_code = 500
    default_message = "Server error"

    def __init__(self, message: Optional[str] = None, error: Any = None):
        self.message = message or self.default_message
        self.error = error
        super().__init__(self.message)


class Unauthenticated(AppError):
    status_code = 401
    default_message = "Authentication required"


class Forbidden(AppError):
    status_code = 403
    default_message = "Not authorized"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class ValidationFailed(AppError):
    status_code = 400
    default_message = "Validation error"


class Conflict(AppError):
    status_code = 400
    default_message = "Request conflicts with current state"


class DuplicateResource(Conflict):
    default_message = "Resource already exists"


class AlreadyLiked(Conflict):
    default_message = "Post already liked"


class NotLiked(Conflict):
    default_message = "Post not liked yet"


class AlreadyApplied(Conflict):
    default_message = "Already applied for this job"


class DeadlinePassed(Conflict):
    default_message = "Application deadline has passed"


class NotAMember(Conflict):
    default_message = "Not a member of this community"


class LastModeratorConstraint(Conflict):
    default_message = "As the only moderator, you cannot leave the community. Assign another moderator first."


class ServerMisconfigured(AppError):
    status_code = 500
    default_message = "Server configuration error"


# Token verification failures. These are not HTTP errors by themselves; the
# auth dependencies translate them into Unauthenticated with a reason.
class TokenError(Exception):
    pass


class ExpiredToken(TokenError):
    pass


class MalformedToken(TokenError):
    pass
