"""
Loading of recorded function run fixtures.

A fixture is a JSON file with a "payload" object holding the export name,
the host target, the function input and the output the host produced.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from discount_function.errors import FixtureError


@dataclass
class Fixture:
    """A recorded function run."""
    export: str
    target: str
    input: dict[str, Any] = field(default_factory=dict)
    expected_output: dict[str, Any] = field(default_factory=dict)
    path: Optional[str] = None

    @property
    def name(self) -> str:
        return Path(self.path).name if self.path else self.export

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: Optional[str] = None) -> Fixture:
        """Create from a decoded fixture document."""
        payload = data.get("payload") if isinstance(data, dict) else None
        if not isinstance(payload, dict):
            raise FixtureError(f"Fixture {path or '<memory>'} has no 'payload' object", path)
        return cls(
            export=payload.get("export", ""),
            target=payload.get("target", ""),
            input=payload.get("input") or {},
            expected_output=payload.get("output") or {},
            path=path,
        )


def load_fixture(path: str | Path) -> Fixture:
    """
    Load and parse a fixture file.

    Args:
        path: Path to the fixture JSON file.

    Returns:
        The parsed Fixture.

    Raises:
        FixtureError: If the file is missing, is not valid JSON or has no payload.
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise FixtureError(f"Failed to load fixture file {path}: {e}", str(path))

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise FixtureError(f"Invalid JSON in fixture file {path}: {e}", str(path))

    return Fixture.from_dict(data, str(path))


def discover_fixtures(directory: str | Path) -> list[Path]:
    """Return the *.json fixture files directly inside a directory, sorted by name."""
    directory = Path(directory)
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.glob("*.json") if p.is_file())
