from rest_framework import status
from rest_framework.exceptions import APIException


class NotFoundOrUnauthorized(APIException):
    """Row is missing, not owned by the caller, or not in a state that allows the action.

    The causes are deliberately indistinguishable to the caller.
    """
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Bill not found or not authorized."
    default_code = "not_found_or_unauthorized"


class BillNotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "No rent bill exists for that month."
    default_code = "bill_not_found"


class InvalidBillTransition(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "This bill is already paid."
    default_code = "invalid_transition"


class StorageUnavailable(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Storage is temporarily unavailable. Please retry."
    default_code = "storage_unavailable"
