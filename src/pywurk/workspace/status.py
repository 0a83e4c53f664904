"""Per-workspace command status."""

from __future__ import annotations

from enum import Enum


class StatusValue(str, Enum):
    """Outcome of a workspace within a command run."""

    PENDING = "pending"
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


TERMINAL = frozenset({StatusValue.SUCCESS, StatusValue.SKIPPED, StatusValue.FAILED})


class Status:
    """Mutable status of one workspace.

    The value is ``None`` until the workspace enters a traversal.

    Attributes:
        value: Current status value.
        detail: Optional free-text detail, such as ``"1.2.0 -> 1.3.0"``.
        error: Exception raised by the workspace callback, if any.
    """

    def __init__(self) -> None:
        self.value: StatusValue | None = None
        self.detail: str | None = None
        self.error: Exception | None = None

    def __repr__(self) -> str:
        return f"Status({self.value}, {self.detail!r})"

    @property
    def is_terminal(self) -> bool:
        return self.value in TERMINAL

    def reset(self) -> None:
        """Return to ``pending`` when entering a traversal."""
        self.value = StatusValue.PENDING
        self.detail = None
        self.error = None

    def set(self, value: StatusValue | str, detail: str | None = None) -> None:
        """Move to ``value`` unless already terminal.

        A terminal status only changes through :meth:`reset` or :meth:`fail`.
        """
        if self.is_terminal:
            return
        self.value = StatusValue(value)
        if detail is not None:
            self.detail = detail

    def set_detail(self, detail: str | None) -> None:
        self.detail = detail

    def fail(self, error: Exception) -> None:
        self.value = StatusValue.FAILED
        self.error = error
        self.detail = str(error) or type(error).__name__

    def settle(self) -> None:
        """Mark success unless a terminal status was already set."""
        if not self.is_terminal:
            self.value = StatusValue.SUCCESS
