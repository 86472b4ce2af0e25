from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    error: str
    detail: str | None = None
    status_code: int


class AppError(Exception):
    """Base application exception."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class InvalidDate(AppError):
    """A supplied date could not be parsed."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Invalid date: {value!r}", status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)


class InvalidDayAmount(AppError):
    """A day quantity is not a multiple of half a day."""

    def __init__(self, value: object, field: str = "days") -> None:
        self.value = value
        self.field = field
        super().__init__(
            f"{field} must be a multiple of 0.5 day, got {value!r}",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )


class RuleViolatesMinimumLaw(AppError):
    """An accrual rule falls below the legal floor of the labor code."""

    def __init__(self, rule_id: str, errors: list[str]) -> None:
        self.rule_id = rule_id
        self.errors = errors
        super().__init__(
            f"Rule {rule_id!r} violates minimum law: {'; '.join(errors)}",
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )


class RuleRegistryError(AppError):
    """The rule registry is inconsistent (no default, duplicate ids, unknown rule)."""


class EmployeeNotFound(AppError):
    def __init__(self, employee_id: object) -> None:
        self.employee_id = employee_id
        super().__init__(f"Employee {employee_id} not found", status_code=status.HTTP_404_NOT_FOUND)


class CarryoverNotFound(AppError):
    def __init__(self, employee_id: object, year: int) -> None:
        super().__init__(
            f"No carryover snapshot for employee {employee_id} in {year}",
            status_code=status.HTTP_404_NOT_FOUND,
        )


class CarryoverLocked(AppError):
    """The snapshot belongs to a closed year and can no longer change."""

    def __init__(self, employee_id: object, year: int) -> None:
        super().__init__(
            f"Carryover for employee {employee_id} in {year} is locked",
            status_code=status.HTTP_409_CONFLICT,
        )


async def _app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=type(exc).__name__,
            detail=exc.message,
            status_code=exc.status_code,
        ).model_dump(),
    )


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            error="ValidationError",
            detail=str(exc.errors()),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        ).model_dump(),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers on the application."""
    app.add_exception_handler(AppError, _app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)  # type: ignore[arg-type]
