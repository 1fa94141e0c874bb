"""Error taxonomy shared by services and the HTTP layer.

Every error carries the HTTP status the API reports for it. Handlers in
``scholarship_portal.main`` turn them into ``{"success": false, "error": ...}``.
"""

from fastapi import status


class PortalError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PortalError):
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(PortalError):
    status_code = status.HTTP_404_NOT_FOUND


class PersistenceError(PortalError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class NotificationError(PortalError):
    status_code = status.HTTP_502_BAD_GATEWAY
