# utils/error_tracker.py
"""Keyed failure collection for runners, with structured details per key."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from utils.logger import get_logger


@dataclass(slots=True)
class ErrorTracker:
    """Collect failures of one run, grouped by stage.

    ``details`` keeps machine-readable context next to the messages, such as
    the scan indices a reconstruction could not place.
    """

    context: str
    errors: Dict[str, List[str]] = field(default_factory=dict)
    details: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def record(self, key: str, message: str, **details: Any) -> None:
        logger = get_logger(self.context)
        if details:
            logger.error("{}: {} {}", key, message, details)
            self.details.setdefault(key, {}).update(details)
        else:
            logger.error("{}: {}", key, message)
        self.errors.setdefault(key, []).append(message)

    def record_exception(self, key: str, exc: BaseException, **details: Any) -> None:
        self.record(key, f"{type(exc).__name__}: {exc}", **details)

    def has_errors(self) -> bool:
        return bool(self.errors)

    def summary(self) -> Dict[str, List[str]]:
        if not self.errors:
            return {}
        logger = get_logger(self.context)
        for key, messages in self.errors.items():
            logger.warning("Encountered {} issues for {}", len(messages), key)
        return dict(self.errors)


__all__ = ["ErrorTracker"]
