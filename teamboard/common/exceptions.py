from fastapi import HTTPException, status


class TeamboardException(HTTPException):
    """Base for errors that map straight onto an HTTP response."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str, status_code: int | None = None):
        super().__init__(status_code=status_code or self.status_code, detail=detail)


class NotFoundError(TeamboardException):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str, resource_id: str | None = None):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(detail=f"{resource} not found")


class AuthenticationError(TeamboardException):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, detail: str = "Access token required"):
        super().__init__(detail=detail)


class PermissionDeniedError(TeamboardException):
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, detail: str = "Access denied"):
        super().__init__(detail=detail)


class BadRequestError(TeamboardException):
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(TeamboardException):
    status_code = status.HTTP_409_CONFLICT
