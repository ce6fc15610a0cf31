"""Progress accounting for chunked pipelines."""

from collections.abc import Callable
from typing import Generic, TypeVar

from fitsync.models.sync import ProgressStatus

StatusT = TypeVar("StatusT", bound=ProgressStatus)

ProgressCallback = Callable[[StatusT], None]


class ProgressTracker(Generic[StatusT]):
    """Owns one pipeline run's status and reports it to a callback.

    The status is mutated only through this tracker. Each emission hands
    the callback a deep copy, so observers never see later mutations.
    Exceptions raised by the callback propagate to the pipeline.
    """

    def __init__(
        self,
        status: StatusT,
        on_progress: "ProgressCallback[StatusT] | None" = None,
    ) -> None:
        self.status = status
        self._on_progress = on_progress

    def _check_open(self) -> None:
        if self.status.is_complete:
            raise RuntimeError("progress is already complete")

    def _advance(self, count: int) -> None:
        self._check_open()
        if count < 0:
            raise ValueError("count must be >= 0")
        processed = self.status.processed_records + count
        if processed > self.status.total_records:
            raise RuntimeError(
                f"processed records ({processed}) would exceed total "
                f"({self.status.total_records})"
            )
        self.status.processed_records = processed

    def add_error(self, message: str) -> None:
        """Append a diagnostic without counting a unit."""
        self._check_open()
        self.status.errors.append(message)

    def processed(self, count: int = 1) -> None:
        """Count units handled without a success/failure distinction."""
        self._advance(count)

    def succeeded(self, count: int = 1) -> None:
        self._advance(count)
        field = self.status.success_field
        if field is not None:
            setattr(self.status, field, getattr(self.status, field) + count)

    def failed(self, message: str | None = None, count: int = 1) -> None:
        self._advance(count)
        self.status.failed_records += count
        if message is not None:
            self.status.errors.append(message)

    def emit(self) -> None:
        """Report the current status to the callback, if any."""
        if self._on_progress is not None:
            self._on_progress(self.status.model_copy(deep=True))

    def complete(self) -> StatusT:
        """Mark the run complete and emit the final status."""
        self._check_open()
        self.status.is_complete = True
        self.emit()
        return self.status
