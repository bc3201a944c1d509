from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Mapping


@dataclass
class TelemetryService:
    path: Path

    def log(self, event_type: str, payload: Mapping[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        rec = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "type": event_type,
            "payload": dict(payload),
        }
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(rec, ensure_ascii=False) + "\n")

    def log_events(self, events: Iterable[Mapping[str, object]], *, only: Iterable[str] = ()) -> None:
        """Forward engine events; ``only`` restricts to the given event types."""
        wanted = set(only)
        for ev in events:
            etype = str(ev.get("type", "unknown"))
            if wanted and etype not in wanted:
                continue
            self.log(etype.lower(), {k: v for k, v in ev.items() if k != "type"})
