class FornaccioError(Exception):
    """Base class for errors raised by the ordering domain."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(FornaccioError):
    status_code = 404


class InvalidOrderError(FornaccioError):
    status_code = 422


class InvalidStatusError(FornaccioError):
    status_code = 422


class InvalidTransitionError(FornaccioError):
    status_code = 409


class ConflictError(FornaccioError):
    status_code = 409


class PaymentProviderError(FornaccioError):
    status_code = 502


class AuthenticationError(FornaccioError):
    status_code = 401
