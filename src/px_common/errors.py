"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Event decoding / ordering
  2xxx: Data consistency (projection arithmetic)
  3xxx: Configuration / contract capability
  4xxx: Query
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Events ---

class UnknownEventTypeError(AppError):
    def __init__(self, event_name: str) -> None:
        super().__init__(1001, f"Unknown event type: {event_name}", 422)


class EventDecodeError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(1002, f"Event payload invalid: {detail}", 422)


class EventOutOfOrderError(AppError):
    def __init__(self, previous: tuple[int, int], current: tuple[int, int]) -> None:
        super().__init__(
            1003,
            f"Event at (block, log_index)={current} arrived after {previous}",
            422,
        )


# --- 2xxx: Data consistency ---

class DataConsistencyError(AppError):
    """Projection arithmetic went somewhere it must never go."""

    def __init__(self, detail: str, code: int = 2001) -> None:
        super().__init__(code, f"Data consistency fault: {detail}", 500)


class NegativeOrderAmountError(DataConsistencyError):
    def __init__(self, order_id: str, remaining: int, traded: int) -> None:
        super().__init__(
            f"order {order_id} has {remaining} remaining, trade consumes {traded}",
            code=2002,
        )


class CandleRangeError(DataConsistencyError):
    def __init__(self, candle_id: str, detail: str) -> None:
        super().__init__(f"candle {candle_id}: {detail}", code=2003)


# --- 3xxx: Configuration / capability ---

class MissingCapabilityError(AppError):
    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(
            3001, f"Exchange ABI is missing required entries: {', '.join(missing)}", 500
        )


class InvalidAbiError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(3002, f"Exchange ABI is invalid: {detail}", 500)


# --- 4xxx: Query ---

class PositionNotFoundError(AppError):
    def __init__(self, trader: str) -> None:
        super().__init__(4001, f"Position not found for trader {trader}", 404)


class OrderNotFoundError(AppError):
    def __init__(self, order_id: str) -> None:
        super().__init__(4002, f"Order not found: {order_id}", 404)


class InvalidCursorError(AppError):
    def __init__(self, cursor: str) -> None:
        super().__init__(4003, f"Invalid pagination cursor: {cursor}", 422)


# --- 9xxx: System ---

class StoreUnavailableError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(9001, f"Entity store unavailable: {detail}", 503)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
