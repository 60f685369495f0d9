import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .exceptions import WireNetworkError

"""Unified diagnostic collection for the wiring pipeline."""


logger = logging.getLogger("wire_network")


class DiagnosticSeverity(Enum):
    """Severity levels for wiring diagnostics."""

    DEBUG = "debug"  # Internal information
    INFO = "info"  # Informational messages for users
    WARNING = "warning"  # Recovered problems (stale ids, skipped entities)
    ERROR = "error"  # Problems that invalidate the computed network


_SEVERITY_ORDER = [
    DiagnosticSeverity.DEBUG,
    DiagnosticSeverity.INFO,
    DiagnosticSeverity.WARNING,
    DiagnosticSeverity.ERROR,
]

_LOG_LEVELS = {
    DiagnosticSeverity.DEBUG: logging.DEBUG,
    DiagnosticSeverity.INFO: logging.INFO,
    DiagnosticSeverity.WARNING: logging.WARNING,
    DiagnosticSeverity.ERROR: logging.ERROR,
}


@dataclass
class Diagnostic:
    """A single diagnostic message with context."""

    severity: DiagnosticSeverity
    message: str
    stage: str  # synthesis, diff, orientation, render, blueprint
    entity_number: Optional[int] = None


class ProgramDiagnostics:
    """Central diagnostic collection for one wiring session.

    Every message is kept for later querying and also forwarded to the
    ``wire_network`` logger, so the CLI's logging configuration decides what
    reaches the terminal.

    Usage:
        diagnostics = ProgramDiagnostics(log_level="info")
        diagnostics.warning("Stale neighbor 12", stage="orientation")
        if diagnostics.has_errors():
            print(diagnostics.format_for_user())
    """

    def __init__(self, log_level: str = "warning", raise_errors: bool = False):
        self.diagnostics: List[Diagnostic] = []
        self.log_level = log_level.lower()
        self.raise_errors = raise_errors
        self._error_count = 0
        self._warning_count = 0
        self.default_stage = "unknown"

    @property
    def min_severity(self) -> DiagnosticSeverity:
        try:
            return DiagnosticSeverity(self.log_level)
        except ValueError:
            return DiagnosticSeverity.WARNING

    def debug(
        self, message: str, stage: str | None = None, entity_number: int | None = None
    ) -> None:
        """Add a debug message (only kept at debug log level)."""
        self._add(DiagnosticSeverity.DEBUG, message, stage, entity_number)

    def info(
        self, message: str, stage: str | None = None, entity_number: int | None = None
    ) -> None:
        """Add an informational message."""
        self._add(DiagnosticSeverity.INFO, message, stage, entity_number)

    def warning(
        self, message: str, stage: str | None = None, entity_number: int | None = None
    ) -> None:
        """Add a warning (always kept, doesn't stop the update)."""
        self._add(DiagnosticSeverity.WARNING, message, stage, entity_number)
        self._warning_count += 1

    def error(
        self, message: str, stage: str | None = None, entity_number: int | None = None
    ) -> None:
        """Add an error. Raises instead when ``raise_errors`` is set."""
        self._add(DiagnosticSeverity.ERROR, message, stage, entity_number)
        self._error_count += 1
        if self.raise_errors:
            raise WireNetworkError(message, entity_number)

    def _add(
        self,
        severity: DiagnosticSeverity,
        message: str,
        stage: str | None,
        entity_number: int | None,
    ) -> None:
        diag = Diagnostic(
            severity=severity,
            message=message,
            stage=stage or self.default_stage,
            entity_number=entity_number,
        )
        logger.log(_LOG_LEVELS[severity], self._format_diagnostic(diag))

        # Warnings and errors are always kept; chatter only at verbose levels
        quiet = severity in (DiagnosticSeverity.DEBUG, DiagnosticSeverity.INFO)
        if quiet and _SEVERITY_ORDER.index(severity) < _SEVERITY_ORDER.index(
            self.min_severity
        ):
            return
        self.diagnostics.append(diag)

    def has_errors(self) -> bool:
        """Check if any errors have been recorded."""
        return self._error_count > 0

    def error_count(self) -> int:
        return self._error_count

    def warning_count(self) -> int:
        return self._warning_count

    def get_messages(
        self, min_severity: DiagnosticSeverity = DiagnosticSeverity.WARNING
    ) -> List[str]:
        """Get formatted messages at or above the specified severity level."""
        threshold = _SEVERITY_ORDER.index(min_severity)
        return [
            self._format_diagnostic(diag)
            for diag in self.diagnostics
            if _SEVERITY_ORDER.index(diag.severity) >= threshold
        ]

    def _format_diagnostic(self, diag: Diagnostic) -> str:
        # Format: SEVERITY [stage:entity]: message
        location_parts = [diag.stage]
        if diag.entity_number is not None:
            location_parts.append(f"entity {diag.entity_number}")
        location = ":".join(location_parts)
        return f"{diag.severity.value.upper()} [{location}]: {diag.message}"

    def format_for_user(self) -> str:
        """Format all diagnostics for user-friendly output."""
        if not self.diagnostics:
            return "No diagnostics."

        messages = self.get_messages(self.min_severity)
        summary = (
            f"\nWiring summary: {self._error_count} error(s), "
            f"{self._warning_count} warning(s)"
        )
        return "\n".join(messages) + summary

    def merge(self, other: "ProgramDiagnostics") -> None:
        """Merge diagnostics from another collector."""
        self.diagnostics.extend(other.diagnostics)
        self._error_count += other._error_count
        self._warning_count += other._warning_count
