from fastapi import HTTPException, status


class Unauthenticated(HTTPException):
    def __init__(self, detail='Could not validate credentials'):
        super().__init__(
            status.HTTP_401_UNAUTHORIZED, detail, {'WWW-Authenticate': 'Bearer'}
        )


class Forbidden(HTTPException):
    def __init__(
        self, detail='You are not authorized to check-in tickets for this event'
    ):
        super().__init__(status.HTTP_403_FORBIDDEN, detail, None)


class InvalidQRCode(HTTPException):
    def __init__(self):
        super().__init__(status.HTTP_400_BAD_REQUEST, 'Invalid QR code', None)


class TicketNotFound(HTTPException):
    def __init__(self):
        super().__init__(status.HTTP_404_NOT_FOUND, 'Ticket not found', None)


class WrongEvent(HTTPException):
    def __init__(self):
        super().__init__(
            status.HTTP_400_BAD_REQUEST, 'Ticket belongs to a different event', None
        )


class MissingValidDate(HTTPException):
    def __init__(self):
        super().__init__(status.HTTP_400_BAD_REQUEST, 'Ticket has no valid date', None)


class CheckInFailed(HTTPException):
    def __init__(self):
        super().__init__(
            status.HTTP_500_INTERNAL_SERVER_ERROR, 'Failed to record check-in', None
        )


class InternalServerError(HTTPException):
    def __init__(self):
        super().__init__(
            status.HTTP_500_INTERNAL_SERVER_ERROR, 'Internal server error', None
        )
