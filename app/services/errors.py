"""
Error taxonomy shared by the workflow services.

Services raise these; ``app.main`` registers one exception handler that turns
them into JSON responses, so routes never translate them by hand.
"""

from fastapi import status


class WorkflowError(Exception):
    """Base class for business-rule failures."""

    code = "workflow_error"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, **context):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict:
        return {"error": self.code, "message": self.message}


class NotFoundError(WorkflowError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class InvalidTargetError(NotFoundError):
    code = "invalid_target"


class ConflictError(WorkflowError):
    code = "conflict"
    status_code = status.HTTP_409_CONFLICT


class AlreadyPremiumError(ConflictError):
    code = "already_premium"


class RequestAlreadyPendingError(ConflictError):
    code = "request_already_pending"


class DuplicateRequestError(ConflictError):
    code = "duplicate_request"


class AlreadyApprovedError(ConflictError):
    code = "already_approved"


class DuplicateFavoriteError(ConflictError):
    code = "duplicate"


class InvalidInputError(WorkflowError):
    code = "invalid_input"
    status_code = status.HTTP_400_BAD_REQUEST


class ForbiddenError(WorkflowError):
    code = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN


class InternalError(WorkflowError):
    code = "internal"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class PaymentProviderError(InternalError):
    code = "payment_provider_error"
    status_code = status.HTTP_502_BAD_GATEWAY
