"""
Redfish Error Mapping

Exception hierarchy for Redfish operations and mapping of Redfish error
responses to user-friendly messages with retry guidance.
"""

from typing import Optional


class RedfishError(Exception):
    """Base exception for Redfish operations (transport or protocol failure)"""

    def __init__(self, message: str, error_code: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(self.message)


class SystemNotFoundError(RedfishError):
    """Raised when the endpoint reports no manageable computer system"""

    def __init__(self, endpoint: Optional[str] = None):
        message = "no computer systems found"
        if endpoint:
            message = f"{message} on {endpoint}"
        super().__init__(message, error_code="SYSTEM_NOT_FOUND")
        self.endpoint = endpoint


class ResourceNotFoundError(RedfishError):
    """Raised when a manager, ethernet interface or boot option lookup fails"""

    def __init__(self, message: str):
        super().__init__(message, error_code="RESOURCE_NOT_FOUND", status_code=404)


class PowerOperationError(RedfishError):
    """
    Raised when a reset action or a power state re-fetch fails.

    Carries the last power state known before the failure so callers can
    record it; the underlying error is chained as __cause__.
    """

    def __init__(self, message: str, power_state=None, reset_type=None, endpoint: Optional[str] = None,
                 status_code: Optional[int] = None):
        super().__init__(message, error_code="POWER_OPERATION_FAILED", status_code=status_code)
        self.power_state = power_state
        self.reset_type = reset_type
        self.endpoint = endpoint


class ServerUnreachableError(RedfishError):
    """Raised when the BMC does not answer on its network endpoint in time"""

    def __init__(self, endpoint: str, timeout: int):
        message = f"Timeout waiting for {endpoint} to become reachable after {timeout}s"
        super().__init__(message, error_code="BMC_UNREACHABLE")
        self.endpoint = endpoint


class OperationCancelledError(RedfishError):
    """Raised at a suspension point once the operation's cancel event is set"""

    def __init__(self, message: str = "Operation cancelled"):
        super().__init__(message, error_code="CANCELLED")


class RedfishErrorCodes:
    """
    Common Redfish message registry IDs and their meanings.
    Reference: DMTF Base message registry
    """

    # Request errors
    PropertyValueNotInList = {
        "code": "PropertyValueNotInList",
        "message": "A property value is not one of the values the BMC accepts.",
        "retry": False,
    }

    PropertyUnknown = {
        "code": "PropertyUnknown",
        "message": "The BMC does not recognize a property in the request.",
        "retry": False,
    }

    ActionNotSupported = {
        "code": "ActionNotSupported",
        "message": "The requested action is not supported by this BMC.",
        "retry": False,
    }

    # Resource state errors
    ResourceInUse = {
        "code": "ResourceInUse",
        "message": "The resource is in use by another operation. Wait and retry.",
        "retry": True,
        "wait_seconds": 30,
    }

    ResourceNotFound = {
        "code": "ResourceNotFound",
        "message": "Requested resource not found. Check BMC firmware version and endpoint support.",
        "retry": False,
    }

    ServiceTemporarilyUnavailable = {
        "code": "ServiceTemporarilyUnavailable",
        "message": "The Redfish service is temporarily unavailable. Wait and retry.",
        "retry": True,
        "wait_seconds": 60,
    }

    # Authentication errors
    InsufficientPrivilege = {
        "code": "InsufficientPrivilege",
        "message": "The account does not have the privilege required for this operation.",
        "retry": False,
    }

    NoValidSession = {
        "code": "NoValidSession",
        "message": "Authentication failed. Check username and password.",
        "retry": False,
    }

    # Generic errors
    GeneralError = {
        "code": "GeneralError",
        "message": "The BMC reported a general error.",
        "retry": False,
    }

    TIMEOUT = {
        "code": "TIMEOUT",
        "message": "Operation timed out. BMC may be busy or unresponsive.",
        "retry": True,
        "wait_seconds": 30,
    }


def map_redfish_error(error_response: dict) -> dict:
    """
    Map a Redfish error response to error info with retry guidance.

    Args:
        error_response: Error body returned by the BMC

    Returns:
        dict with keys: code, message, retry, wait_seconds
    """
    error_code = None
    error_message = ""

    # Format 1: @Message.ExtendedInfo array
    if isinstance(error_response, dict):
        error_obj = error_response.get("error", {})
        extended_info = error_obj.get("@Message.ExtendedInfo", []) if isinstance(error_obj, dict) else []
        if extended_info and isinstance(extended_info, list):
            first_error = extended_info[0]
            error_code = first_error.get("MessageId", "").split(".")[-1]  # e.g., "Base.1.8.GeneralError" -> "GeneralError"
            error_message = first_error.get("Message", "")

        # Format 2: Direct error object
        if not error_code and isinstance(error_obj, dict):
            error_code = error_obj.get("code", "").split(".")[-1]
            error_message = error_obj.get("message", "")
        elif not error_message and isinstance(error_obj, str):
            error_message = error_obj

    # Map to known registry IDs
    if error_code:
        for attr_name in dir(RedfishErrorCodes):
            if not attr_name.startswith("_"):
                error_info = getattr(RedfishErrorCodes, attr_name)
                if isinstance(error_info, dict) and error_info.get("code") == error_code:
                    if error_message:
                        return dict(error_info, message=error_message)
                    return error_info

    # Check message content for known patterns
    error_message_lower = error_message.lower()

    if "in use" in error_message_lower or "busy" in error_message_lower:
        return dict(RedfishErrorCodes.ResourceInUse, message=error_message)

    if "unauthorized" in error_message_lower or "authentication" in error_message_lower:
        return RedfishErrorCodes.NoValidSession

    if "not found" in error_message_lower or "404" in error_message_lower:
        return dict(RedfishErrorCodes.ResourceNotFound, message=error_message)

    if "timeout" in error_message_lower or "timed out" in error_message_lower:
        return RedfishErrorCodes.TIMEOUT

    # Unknown error - return as-is with conservative retry
    return {
        "code": error_code or "UNKNOWN",
        "message": error_message or "Unknown error occurred",
        "retry": False,
        "wait_seconds": 0,
    }
