from rest_framework import status
from rest_framework.exceptions import APIException, NotFound
from rest_framework.exceptions import ValidationError as DRFValidationError


class ValidationError(DRFValidationError):
    """Malformed input: month outside 1-12, negative amounts, rejection > total parts."""


class NotFoundError(NotFound):
    default_detail = "Not found."


class DuplicateEntryError(APIException):
    """A uniqueness rule of the ledger was violated (upad month, salary deduction month)."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = "An entry for this period already exists."
    default_code = "duplicate_entry"


class ConfigurationError(APIException):
    """Server-side catalog misconfiguration; not correctable by the caller."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Salary catalog is misconfigured."
    default_code = "configuration_error"
