from fabric_catalog.errors import ErrorType
from fabric_catalog.schemas.fabric import CamelModel


class OperationResult(CamelModel):
    success: bool
    message: str
    errors: dict[str, list[str]] | None = None
    error_type: ErrorType | None = None
    conflict: str | None = None
    fabric_id: int | None = None

    @classmethod
    def ok(cls, message: str, fabric_id: int | None = None) -> "OperationResult":
        return cls(success=True, message=message, fabric_id=fabric_id)

    @classmethod
    def fail(
        cls,
        error_type: ErrorType,
        message: str,
        errors: dict[str, list[str]] | None = None,
        conflict: str | None = None,
    ) -> "OperationResult":
        return cls(
            success=False,
            message=message,
            errors=errors,
            error_type=error_type,
            conflict=conflict,
        )
