from core.exceptions import NotFound, ReferentialFailure, StorageFailure, ValidationFailure


class ErrorCode:
    GAME_NOT_FOUND = "GAME_NOT_FOUND"
    INVALID_ENUM_VALUE = "INVALID_ENUM_VALUE"
    CONSTRAINT_VIOLATION = "CONSTRAINT_VIOLATION"
    INVALID_INPUT = "INVALID_INPUT"

    MOVE_NUMBER_REGRESSION = "MOVE_NUMBER_REGRESSION"

    STATS_NOT_INITIALIZED = "STATS_NOT_INITIALIZED"
    DB_UNAVAILABLE = "DB_UNAVAILABLE"
    DB_POOL_EXHAUSTED = "DB_POOL_EXHAUSTED"
    DB_ERROR = "DB_ERROR"


class ErrorMessage:
    GAME_NOT_FOUND = "Game not found"
    CONSTRAINT_VIOLATION = "Write violates a storage constraint"
    INVALID_INPUT = "Invalid input"
    MOVE_NUMBER_REGRESSION = "Move number is lower than the game's current move count"

    STATS_NOT_INITIALIZED = "Statistics record is not initialized"
    DB_UNAVAILABLE = "Database is unavailable"
    DB_POOL_EXHAUSTED = "Could not acquire a database connection"
    DB_ERROR = "Database operation failed"


def game_not_found(game_id: int):
    return NotFound(
        code=ErrorCode.GAME_NOT_FOUND,
        message=ErrorMessage.GAME_NOT_FOUND,
        details={"gameId": game_id},
    )


def invalid_enum(field: str, value, allowed):
    return ReferentialFailure(
        code=ErrorCode.INVALID_ENUM_VALUE,
        message=f"Invalid value for {field}: {value!r}",
        details={"field": field, "allowed": sorted(allowed)},
    )


def constraint_violation(details: dict | None = None):
    return ReferentialFailure(
        code=ErrorCode.CONSTRAINT_VIOLATION,
        message=ErrorMessage.CONSTRAINT_VIOLATION,
        details=details,
    )


def invalid_input(errors: list[dict]):
    return ValidationFailure(
        code=ErrorCode.INVALID_INPUT,
        message=ErrorMessage.INVALID_INPUT,
        details={"errors": errors},
    )


def move_number_regression(game_id: int, move_number: int, move_count: int):
    return ValidationFailure(
        code=ErrorCode.MOVE_NUMBER_REGRESSION,
        message=ErrorMessage.MOVE_NUMBER_REGRESSION,
        details={"gameId": game_id, "moveNumber": move_number, "moveCount": move_count},
    )


def storage_failure(code: str = ErrorCode.DB_ERROR, message: str = ErrorMessage.DB_ERROR):
    return StorageFailure(code=code, message=message)
