from __future__ import annotations
import json
from typing import Any, Dict, Iterable, List
from pathlib import Path

from testkit.core.errors import ConfigError
from testkit.core.event import ExecutionEvent
from testkit.core.recorder import ExecutionResults


def events_to_dict(events: Iterable[ExecutionEvent]) -> Dict[str, Any]:
    return {
        "schema_version": "1",
        "events": [e.to_dict() for e in events],
    }


def events_from_dict(d: Dict[str, Any]) -> List[ExecutionEvent]:
    try:
        return [ExecutionEvent.from_dict(item) for item in d.get("events", [])]
    except (KeyError, ValueError, TypeError) as e:
        raise ConfigError(f"Malformed event record: {e}") from e


def save_events(path: str | Path, events: Iterable[ExecutionEvent]) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        json.dump(events_to_dict(events), f, ensure_ascii=False, indent=2)


def load_events(path: str | Path) -> ExecutionResults:
    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Could not parse event log {p}: {e}") from e
    if isinstance(data, dict) and "events" in data:
        return ExecutionResults(tuple(events_from_dict(data)))
    if isinstance(data, list):
        return ExecutionResults(tuple(events_from_dict({"events": data, "schema_version": "1"})))
    raise ConfigError("Unrecognized event log JSON format")


def save_json(path: str | Path, obj: Dict[str, Any]) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        json.dump(obj, f, ensure_ascii=False, indent=2)
