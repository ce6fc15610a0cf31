"""Custom exceptions for fitsync."""

from typing import Any


class ApplicationError(Exception):
    """Raised (or carried in a failed Result) when an operation cannot complete."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for tool responses."""
        data: dict[str, Any] = {"message": self.message}
        if self.cause is not None:
            data["cause"] = str(self.cause)
        return data


class ValidationError(ApplicationError):
    """Raised when validation fails."""

    pass


class ConflictError(ApplicationError):
    """Raised when an import fails badly enough to need a user decision.

    Attributes:
        descriptor: Enumerates every failure accumulated during the import
    """

    def __init__(self, message: str, descriptor: Any) -> None:
        super().__init__(message)
        self.descriptor = descriptor

    @property
    def conflicts(self) -> tuple[Any, ...]:
        return self.descriptor.conflicts

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["conflicts"] = [c.model_dump() for c in self.descriptor.conflicts]
        return data
