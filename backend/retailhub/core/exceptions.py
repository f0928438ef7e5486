"""
Error handling for the stock backend.

Services raise the domain exceptions below; routes turn them into HTTP
errors with `BusinessError` via `to_http()`. Internal failures are logged
with detail and answered with a generic message.
"""
from fastapi import HTTPException, status
import logging

logger = logging.getLogger(__name__)


class RetailHubError(Exception):
    """Base class for domain errors. `message` is safe to show to the operator."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class RecordNotFound(RetailHubError):
    def __init__(self, resource: str, record_id=None):
        self.resource = resource
        self.record_id = record_id
        super().__init__(f"{resource} not found")


class ValidationFailed(RetailHubError):
    """Rejected input: empty code, missing references, bad values."""


class DuplicateBarcode(RetailHubError):
    def __init__(self, barcode: str):
        self.barcode = barcode
        super().__init__(
            f"This barcode ({barcode}) has already been admitted. "
            "Cannot admit the same product twice."
        )


class CodeMismatch(RetailHubError):
    def __init__(self, code: str, base_code: str):
        self.code = code
        self.base_code = base_code
        super().__init__(f"Invalid barcode: {code}. Expected format: {base_code}-XX")


class AdmissionConflict(RetailHubError):
    """Another submission for the same batch committed first."""


class RecordInUse(RetailHubError):
    """Delete refused because other records still reference this one."""


class RecordConflict(RetailHubError):
    """Write rejected by a uniqueness or reference constraint."""


class PersistenceFailure(RetailHubError):
    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.original_error = original_error


class BusinessError:
    """HTTP errors with safe (non-leaky) messages."""

    @staticmethod
    def not_found(resource: str = "Resource", reason: str = "") -> HTTPException:
        if reason:
            logger.info(f"Not found: {resource} - {reason}")
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{resource} not found",
        )

    @staticmethod
    def unauthorized(reason: str = "") -> HTTPException:
        """
        Generic 401 for all authentication failures.

        Same response for wrong password and unknown user, so accounts
        cannot be enumerated.
        """
        logger.warning(f"Unauthorized access attempt: {reason}")
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication failed",
            headers={"WWW-Authenticate": "Bearer"},
        )

    @staticmethod
    def forbidden(reason: str = "") -> HTTPException:
        logger.warning(f"Forbidden access: {reason}")
        return HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied",
        )

    @staticmethod
    def bad_request(detail: str) -> HTTPException:
        """400 for input validation. The operator caused it, so the detail is shown."""
        logger.info(f"Bad request: {detail}")
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
        )

    @staticmethod
    def conflict(detail: str) -> HTTPException:
        """409 for duplicate barcodes, concurrent admissions, records still in use."""
        logger.info(f"Conflict: {detail}")
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
        )

    @staticmethod
    def server_error(original_error: Exception = None) -> HTTPException:
        """
        Generic 500 - logs actual error internally, hides it from the client.
        """
        if original_error:
            logger.error(
                f"Internal server error: {type(original_error).__name__}: {str(original_error)}",
                exc_info=original_error
            )
        else:
            logger.error("Internal server error occurred", exc_info=True)

        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An internal error occurred. Please try again later.",
        )


def to_http(error: RetailHubError) -> HTTPException:
    """Map a domain error onto the matching BusinessError response."""
    if isinstance(error, RecordNotFound):
        return BusinessError.not_found(error.resource, reason=f"id={error.record_id}")
    if isinstance(error, (DuplicateBarcode, AdmissionConflict, RecordInUse, RecordConflict)):
        return BusinessError.conflict(error.message)
    if isinstance(error, (ValidationFailed, CodeMismatch)):
        return BusinessError.bad_request(error.message)
    if isinstance(error, PersistenceFailure):
        return BusinessError.server_error(error.original_error or error)
    return BusinessError.server_error(error)
