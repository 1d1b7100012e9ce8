from __future__ import annotations


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class NotFoundError(AppError):
    pass


class ConflictError(AppError):
    pass


class AuthenticationError(AppError):
    pass


class DeliveryError(AppError):
    """Errors raised inside the presence and delivery core.

    They never leave the core: every one of them is caught and logged at the
    point where it affects a single connection or a single message.
    """


class InvalidTokenError(DeliveryError, AuthenticationError):
    pass


class MalformedEnvelopeError(DeliveryError):
    pass


class StorageWriteError(DeliveryError):
    pass


class PersistenceError(DeliveryError):
    pass


class TransportSendError(DeliveryError):
    pass
