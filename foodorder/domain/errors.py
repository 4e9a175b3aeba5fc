"""Error taxonomy shared by services and the HTTP layer.

Every error carries a machine-readable ``code`` and the HTTP status the API
answers with. ``message`` is the short text of the response envelope.
"""


class AppError(Exception):
    code = "error"
    status_code = 500
    message = "Error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.__class__.__name__
        super().__init__(self.detail)


class Unauthenticated(AppError):
    code = "unauthenticated"
    status_code = 401
    message = "Not Authorized, Login Again"


class TokenInvalid(AppError):
    code = "token_invalid"
    status_code = 401


class ValidationError(AppError):
    code = "validation_error"
    status_code = 400


class OrderNotFound(AppError):
    code = "order_not_found"
    status_code = 404


class OrderAlreadyFinalized(AppError):
    code = "order_already_finalized"
    status_code = 409


class ConcurrencyConflict(AppError):
    code = "concurrency_conflict"
    status_code = 409


class PersistenceError(AppError):
    code = "persistence_error"
    status_code = 503


class OrderCreationError(PersistenceError):
    pass


class GatewayError(AppError):
    code = "gateway_error"
    status_code = 502


class CatalogError(AppError):
    code = "catalog_error"
    status_code = 502


class WebhookSignatureError(AppError):
    code = "webhook_signature_invalid"
    status_code = 400
