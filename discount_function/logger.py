"""
Run event log.

Each function run appends JSON lines to
<data_dir>/logs/<export>-YYYY-MM-DD.jsonl: a start event followed by either
a complete event (with the number of operations produced) or an error event.
Fixture runs tag their events with the fixture name as run_id.
"""

from __future__ import annotations

import json
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Iterator, Optional

from discount_function.config import DiscountConfig, get_config


class RunEventType(str, Enum):
    """Events written for a function run."""
    START = "function_run_start"
    COMPLETE = "function_run_complete"
    ERROR = "function_run_error"

    @property
    def level(self) -> str:
        return "error" if self is RunEventType.ERROR else "info"


@dataclass
class RunEvent:
    """One line of the run log."""
    timestamp: str
    event_type: RunEventType
    export: str
    data: dict[str, Any] = field(default_factory=dict)
    run_id: Optional[str] = None

    @property
    def level(self) -> str:
        return self.event_type.level

    def to_dict(self) -> dict[str, Any]:
        entry = {
            "timestamp": self.timestamp,
            "level": self.level,
            "event_type": self.event_type.value,
            "export": self.export,
            "data": self.data,
        }
        if self.run_id:
            entry["run_id"] = self.run_id
        return entry

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RunEvent:
        return cls(
            timestamp=data["timestamp"],
            event_type=RunEventType(data["event_type"]),
            export=data["export"],
            data=data.get("data") or {},
            run_id=data.get("run_id"),
        )


def _today() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d")


class RunLogger:
    """Appends and reads run events for one export."""

    def __init__(self, export: str, config: Optional[DiscountConfig] = None) -> None:
        self.export = export
        self._config = config
        self._run_id: Optional[str] = None

    @property
    def config(self) -> DiscountConfig:
        """Get configuration (lazy load)."""
        if self._config is None:
            self._config = get_config()
        return self._config

    def log_path(self, date: Optional[str] = None) -> Path:
        """Path of the log file for a date (YYYY-MM-DD, default today in UTC)."""
        return self.config.logs_path / f"{self.export}-{date or _today()}.jsonl"

    def _append(self, event_type: RunEventType, data: dict[str, Any]) -> RunEvent:
        event = RunEvent(
            timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            event_type=event_type,
            export=self.export,
            data=data,
            run_id=self._run_id,
        )
        path = self.log_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            f.write(json.dumps(event.to_dict(), default=str) + "\n")
        return event

    # ------------------------------------------------------------------
    # Writers
    # ------------------------------------------------------------------

    def run_start(self) -> RunEvent:
        return self._append(RunEventType.START, {})

    def run_complete(self, operation_count: int) -> RunEvent:
        return self._append(RunEventType.COMPLETE, {"operations": operation_count})

    def run_error(self, error: Exception) -> RunEvent:
        return self._append(
            RunEventType.ERROR,
            {"error": str(error), "error_type": type(error).__name__},
        )

    @contextmanager
    def run_context(self, run_id: str) -> Iterator[RunLogger]:
        """Tag every event written inside the block with run_id."""
        previous = self._run_id
        self._run_id = run_id
        try:
            yield self
        finally:
            self._run_id = previous

    # ------------------------------------------------------------------
    # Readers
    # ------------------------------------------------------------------

    def log_dates(self) -> list[str]:
        """Dates that have a log file for this export, newest first."""
        logs_dir = self.config.logs_path
        if not logs_dir.exists():
            return []
        prefix = f"{self.export}-"
        return sorted(
            (path.stem[len(prefix):] for path in logs_dir.glob(f"{prefix}*.jsonl")),
            reverse=True,
        )

    def events(
        self,
        date: Optional[str] = None,
        event_type: Optional[RunEventType] = None,
        run_id: Optional[str] = None,
        errors_only: bool = False,
        limit: Optional[int] = None,
    ) -> list[RunEvent]:
        """
        Read the events logged on a date, oldest first.

        Lines that are not valid events are skipped. When limit is set the
        most recent matching events are returned.
        """
        path = self.log_path(date)
        if not path.exists():
            return []

        matched: list[RunEvent] = []
        with open(path, encoding="utf-8") as f:
            for line in f:
                try:
                    event = RunEvent.from_dict(json.loads(line))
                except (json.JSONDecodeError, KeyError, TypeError, ValueError):
                    continue
                if event_type is not None and event.event_type is not event_type:
                    continue
                if run_id is not None and event.run_id != run_id:
                    continue
                if errors_only and event.event_type is not RunEventType.ERROR:
                    continue
                matched.append(event)

        if limit is not None:
            return matched[-limit:] if limit > 0 else []
        return matched
