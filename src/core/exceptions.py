"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"
    NOT_A_MEMBER = "NOT_A_MEMBER"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"
    PUBLIC_JOIN_DISABLED = "PUBLIC_JOIN_DISABLED"

    # Not found errors (404)
    AGENCY_NOT_FOUND = "AGENCY_NOT_FOUND"
    INVALID_INVITE = "INVALID_INVITE"
    MEMBERSHIP_NOT_FOUND = "MEMBERSHIP_NOT_FOUND"
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    SUBMISSION_NOT_FOUND = "SUBMISSION_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NO_URL_PROVIDED = "NO_URL_PROVIDED"
    SUBMISSION_NOT_MODIFIABLE = "SUBMISSION_NOT_MODIFIABLE"
    CANNOT_DEACTIVATE_SELF = "CANNOT_DEACTIVATE_SELF"
    ROLE_NOT_MANAGEABLE = "ROLE_NOT_MANAGEABLE"

    # Conflict errors (409)
    ALREADY_A_MEMBER = "ALREADY_A_MEMBER"
    AGENCY_NAME_TAKEN = "AGENCY_NAME_TAKEN"
    DUPLICATE_URL = "DUPLICATE_URL"
    ALREADY_REVIEWED = "ALREADY_REVIEWED"
    MEMBERSHIP_NOT_PENDING = "MEMBERSHIP_NOT_PENDING"

    # Gone (410)
    INVITE_EXPIRED = "INVITE_EXPIRED"
    INVITE_EXHAUSTED = "INVITE_EXHAUSTED"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


# --- Categories ---


class ValidationError(AppException):
    """Malformed or missing required input."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: Any | None = None,
    ) -> None:
        super().__init__(error_code=error_code, message=message, status_code=400, details=details)


class NotFoundError(AppException):
    """Referenced record does not exist."""

    def __init__(self, error_code: ErrorCode, message: str, details: Any | None = None) -> None:
        super().__init__(error_code=error_code, message=message, status_code=404, details=details)


class ConflictError(AppException):
    """Operation would break a uniqueness or state-machine invariant."""

    def __init__(self, error_code: ErrorCode, message: str, details: Any | None = None) -> None:
        super().__init__(error_code=error_code, message=message, status_code=409, details=details)


class ExpiredOrExhaustedError(AppException):
    """Invite exists but can no longer be redeemed."""

    def __init__(self, error_code: ErrorCode, message: str, details: Any | None = None) -> None:
        super().__init__(error_code=error_code, message=message, status_code=410, details=details)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class AuthorizationError(AppException):
    """Authorization failed (caller's role does not allow the operation)."""

    def __init__(
        self,
        message: str = "Access denied",
        error_code: ErrorCode = ErrorCode.FORBIDDEN,
        details: Any | None = None,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=403,
            details=details,
        )


# --- Validation ---


class NoUrlProvidedError(ValidationError):
    """Submission carried no video URL."""

    def __init__(self) -> None:
        super().__init__(
            message="At least one URL must be provided",
            error_code=ErrorCode.NO_URL_PROVIDED,
        )


class SubmissionNotModifiableError(ValidationError):
    """Reviewed submissions can no longer be edited or withdrawn."""

    def __init__(self, submission_id: str, status: str) -> None:
        super().__init__(
            message=f"Cannot modify a submission that is already {status}",
            error_code=ErrorCode.SUBMISSION_NOT_MODIFIABLE,
            details={"submission_id": submission_id, "status": status},
        )


class CannotDeactivateSelfError(ValidationError):
    """An admin tried to deactivate their own account."""

    def __init__(self) -> None:
        super().__init__(
            message="Cannot deactivate your own account",
            error_code=ErrorCode.CANNOT_DEACTIVATE_SELF,
        )


class RoleNotManageableError(ValidationError):
    """Only creator accounts can be activated or deactivated."""

    def __init__(self, user_id: str, role: str) -> None:
        super().__init__(
            message="Only creator accounts can be activated or deactivated",
            error_code=ErrorCode.ROLE_NOT_MANAGEABLE,
            details={"user_id": user_id, "role": role},
        )


# --- Not found ---


class AgencyNotFoundError(NotFoundError):
    """Agency not found."""

    def __init__(self, agency_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.AGENCY_NOT_FOUND,
            message=f"Agency not found: {agency_id}",
            details={"agency_id": agency_id},
        )


class InviteNotFoundError(NotFoundError):
    """No active invite matches the code."""

    def __init__(self, invite_code: str = "") -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_INVITE,
            message="Invalid or expired invite code",
            details={"invite_code": invite_code} if invite_code else None,
        )


class MembershipNotFoundError(NotFoundError):
    """User has no membership in the agency."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.MEMBERSHIP_NOT_FOUND,
            message="User is not a member of this agency",
            details={"user_id": user_id},
        )


class ProfileNotFoundError(NotFoundError):
    """User profile not found."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message=f"Profile not found: {user_id}",
            details={"user_id": user_id},
        )


class SubmissionNotFoundError(NotFoundError):
    """Submission not found."""

    def __init__(self, submission_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.SUBMISSION_NOT_FOUND,
            message=f"Submission not found: {submission_id}",
            details={"submission_id": submission_id},
        )


# --- Conflicts ---


class AlreadyAMemberError(ConflictError):
    """User already belongs to an agency."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.ALREADY_A_MEMBER,
            message="You are already a member of an agency",
            details={"user_id": user_id},
        )


class AgencyNameTakenError(ConflictError):
    """Normalized agency name is already in use."""

    def __init__(self, name: str) -> None:
        super().__init__(
            error_code=ErrorCode.AGENCY_NAME_TAKEN,
            message=f"Agency name already taken: {name}",
            details={"name": name},
        )


class DuplicateVideoUrlError(ConflictError):
    """Video URL was already submitted by someone."""

    def __init__(self, video_url: str) -> None:
        super().__init__(
            error_code=ErrorCode.DUPLICATE_URL,
            message=f"This URL has already been submitted: {video_url}",
            details={"video_url": video_url},
        )


class AlreadyReviewedError(ConflictError):
    """Submission is no longer pending."""

    def __init__(self, submission_id: str, status: str) -> None:
        super().__init__(
            error_code=ErrorCode.ALREADY_REVIEWED,
            message=f"Submission has already been reviewed (status: {status})",
            details={"submission_id": submission_id, "status": status},
        )


class MembershipNotPendingError(ConflictError):
    """Approval or rejection of a membership that is not pending."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.MEMBERSHIP_NOT_PENDING,
            message="Membership is not awaiting approval",
            details={"user_id": user_id},
        )


# --- Expired / exhausted ---


class InviteExpiredError(ExpiredOrExhaustedError):
    """Invite is past its expiry time."""

    def __init__(self, invite_code: str) -> None:
        super().__init__(
            error_code=ErrorCode.INVITE_EXPIRED,
            message="This invite code has expired",
            details={"invite_code": invite_code},
        )


class InviteExhaustedError(ExpiredOrExhaustedError):
    """Invite has no uses left."""

    def __init__(self, invite_code: str) -> None:
        super().__init__(
            error_code=ErrorCode.INVITE_EXHAUSTED,
            message="This invite code has reached its maximum number of uses",
            details={"invite_code": invite_code},
        )


# --- Permissions ---


class NotAMemberError(AuthorizationError):
    """User is not a member of the agency."""

    def __init__(self, agency_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.NOT_A_MEMBER,
            message="You are not a member of this agency",
            details={"agency_id": agency_id},
        )


class InsufficientPermissionsError(AuthorizationError):
    """User does not have sufficient permissions."""

    def __init__(self, required_role: str = "admin") -> None:
        super().__init__(
            error_code=ErrorCode.INSUFFICIENT_PERMISSIONS,
            message=f"Insufficient permissions. Required role: {required_role}",
            details={"required_role": required_role},
        )


class PublicJoinDisabledError(AuthorizationError):
    """Agency does not accept members without an invite."""

    def __init__(self, agency_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.PUBLIC_JOIN_DISABLED,
            message="This agency can only be joined with an invite code",
            details={"agency_id": agency_id},
        )
