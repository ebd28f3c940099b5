"""Custom exceptions for the predictor."""
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError
import structlog

logger = structlog.get_logger()


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        code: str = "APP_ERROR",
        details: Optional[dict] = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class InvalidBasePriceError(AppException):
    """Raised when the floor price cannot be used as a prediction base."""

    def __init__(
        self,
        message: str = "Invalid or missing base price",
        value: Any = None,
    ):
        super().__init__(
            message=message,
            code="INVALID_BASE_PRICE",
            details={"value": repr(value)},
        )


class InputValidationError(AppException):
    """Raised when an upstream payload does not match the expected schema."""

    def __init__(self, source: str, errors: list[dict]):
        fields = ", ".join(error["field"] for error in errors) or source
        super().__init__(
            message=f"Invalid {source} payload: {fields}",
            code="VALIDATION_ERROR",
            details={"source": source, "errors": errors},
        )

    @classmethod
    def from_pydantic(
        cls,
        source: str,
        exc: PydanticValidationError,
    ) -> "InputValidationError":
        """Build from a pydantic error, one entry per offending field."""
        errors = []
        for error in exc.errors():
            field = ".".join(str(loc) for loc in error["loc"])
            errors.append({
                "field": field,
                "message": error["msg"],
                "type": error["type"],
            })

        logger.warning(
            "Validation error",
            source=source,
            errors=errors,
        )

        return cls(source, errors)
