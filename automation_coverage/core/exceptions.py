from fastapi import HTTPException, status


class AutomationCoverageError(Exception):
    """Base class for errors raised by the service layer"""


class NotFoundError(AutomationCoverageError):
    """A requested issue, test case or build result does not exist"""


class ValidationError(AutomationCoverageError):
    """The request is missing data or carries values that cannot be applied"""


class ExternalServiceError(AutomationCoverageError):
    """An external system failed while serving a user-initiated action"""

    def __init__(self, service: str, message: str):
        super().__init__(f"{service}: {message}")
        self.service = service
        self.message = message


class QTestAuthenticationError(ExternalServiceError):
    def __init__(self, message: str = "authentication failed"):
        super().__init__("qtest", message)


def to_http_exception(exc: AutomationCoverageError) -> HTTPException:
    """HTTP error a route should raise for a service-layer failure"""
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, ExternalServiceError):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
