"""Structured JSONL run log utilities."""

from __future__ import annotations

import json
import threading
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path

_MAX_LOGGED_STRING = 200


@dataclass(slots=True, frozen=True)
class RunEvent:
    """Sanitized record of one analysis stage."""

    timestamp: str
    run_id: str
    event: str
    ok: bool
    metadata: dict[str, object]


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sanitize_metadata(metadata: dict[str, object]) -> dict[str, object]:
    """Keep scalar metadata and reduce everything else to type and size."""
    sanitized: dict[str, object] = {}
    for key in sorted(metadata.keys()):
        value = metadata[key]
        if key in {"path", "reason", "language"} and isinstance(value, str):
            sanitized[key] = value[:_MAX_LOGGED_STRING]
            continue
        if isinstance(value, (int, float, bool)) or value is None:
            sanitized[key] = value
            continue
        if isinstance(value, str):
            # Free text may be source code; log only its size.
            sanitized[f"{key}_present"] = True
            sanitized[f"{key}_length"] = len(value)
            continue
        if isinstance(value, (list, tuple)):
            sanitized[f"{key}_type"] = "list"
            sanitized[f"{key}_length"] = len(value)
            continue
        if isinstance(value, dict):
            sanitized[key] = sanitize_metadata({str(k): v for k, v in value.items()})
            continue
        sanitized[f"{key}_type"] = type(value).__name__
    return sanitized


class JsonlRunLogger:
    """Append-only JSONL run logger."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def append(self, event: RunEvent) -> None:
        """Append an event as one JSON object per line."""
        line = json.dumps(asdict(event), sort_keys=True) + "\n"
        with self._lock, self._path.open("a", encoding="utf-8") as log_file:
            log_file.write(line)

    def log(self, run_id: str, event: str, ok: bool = True, **metadata: object) -> None:
        """Sanitize metadata and append a timestamped event."""
        self.append(
            RunEvent(
                timestamp=utc_timestamp(),
                run_id=run_id,
                event=event,
                ok=ok,
                metadata=sanitize_metadata(metadata),
            )
        )
