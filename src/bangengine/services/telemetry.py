from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping

from bangengine.engine.state import MatchState


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

    def export_match(self, state: MatchState) -> int:
        """Append every event of ``state`` as one record; returns how many were written."""
        for event in state.event_log:
            payload = {k: v for k, v in event.items() if k != "type"}
            payload["seed"] = state.seed
            self.log(str(event["type"]), payload)
        return len(state.event_log)
