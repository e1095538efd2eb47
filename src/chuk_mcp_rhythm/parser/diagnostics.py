"""
Parse diagnostics - what the tree builder dropped, skipped or rejected.

The builder degrades gracefully on malformed or out-of-order notation.
Every such decision is recorded here so callers can see it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class IssueSeverity(str, Enum):
    """Severity level for parse issues."""

    ERROR = "error"  # Part of the input was rejected
    WARNING = "warning"  # Something was dropped or adjusted
    INFO = "info"  # Informational only


@dataclass
class ParseIssue:
    """A single parse issue."""

    severity: IssueSeverity
    code: str
    message: str
    location: str | None = None
    error: Exception | None = None

    def __post_init__(self) -> None:
        # Codes are stored as plain strings so they format and serialize cleanly
        if isinstance(self.code, Enum):
            self.code = self.code.value

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        d: dict[str, Any] = {
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
        }
        if self.location:
            d["location"] = self.location
        return d

    def __str__(self) -> str:
        prefix = f"[{self.severity.value.upper()}]"
        location = f" at {self.location}" if self.location else ""
        return f"{prefix} {self.code}: {self.message}{location}"


class ParseReport:
    """Issues collected over one parse."""

    def __init__(self) -> None:
        self.issues: list[ParseIssue] = []

    def add_error(
        self,
        code: str,
        message: str,
        location: str | None = None,
        error: Exception | None = None,
    ) -> None:
        """Add an error issue."""
        self.issues.append(ParseIssue(IssueSeverity.ERROR, code, message, location, error))

    def add_warning(self, code: str, message: str, location: str | None = None) -> None:
        """Add a warning issue."""
        self.issues.append(ParseIssue(IssueSeverity.WARNING, code, message, location))

    def add_info(self, code: str, message: str, location: str | None = None) -> None:
        """Add an info issue."""
        self.issues.append(ParseIssue(IssueSeverity.INFO, code, message, location))

    @property
    def is_clean(self) -> bool:
        """Return True if nothing was rejected or dropped."""
        return not any(i.severity != IssueSeverity.INFO for i in self.issues)

    @property
    def errors(self) -> list[ParseIssue]:
        """Get all error issues."""
        return [i for i in self.issues if i.severity == IssueSeverity.ERROR]

    @property
    def warnings(self) -> list[ParseIssue]:
        """Get all warning issues."""
        return [i for i in self.issues if i.severity == IssueSeverity.WARNING]

    def codes(self) -> list[str]:
        """Issue codes in the order they were recorded."""
        return [i.code for i in self.issues]

    def to_dict(self) -> list[dict[str, Any]]:
        return [i.to_dict() for i in self.issues]

    def __len__(self) -> int:
        return len(self.issues)

    def __str__(self) -> str:
        if not self.issues:
            return "Parse clean: no issues found"
        return "\n".join(str(issue) for issue in self.issues)
