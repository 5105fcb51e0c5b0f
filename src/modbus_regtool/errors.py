"""Clear exceptions for modbus-regtool: bad input, unsupported operations and transport failures."""


class RegToolError(Exception):
    """Base exception for modbus-regtool."""

    pass


class InvalidInputError(RegToolError):
    """Raised when a caller-supplied token fails to parse or a request is missing values."""

    def __init__(self, message: str, *, token: str | None = None) -> None:
        self.token = token
        super().__init__(message)


class UnsupportedOperationError(RegToolError):
    """Raised when a function code is not one of the supported reads/writes."""

    def __init__(self, function_code: object, message: str | None = None) -> None:
        self.function_code = function_code
        self._msg = message or f"Unsupported function code: {function_code!r}"
        super().__init__(self._msg)


class TransportError(RegToolError):
    """Raised when a transport read/write fails (wraps pymodbus, serial or device errors)."""

    def __init__(
        self,
        message: str,
        *,
        table: str | None = None,
        address: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.table = table
        self.address = address
        self.cause = cause
        super().__init__(message)
