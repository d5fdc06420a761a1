from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict

from score_watch.game_time import GameTime


@dataclass(frozen=True)
class MatchSnapshot:
    my_team: str
    my_team_score: int
    opponent_team: str
    opponent_team_score: int
    game_time: GameTime
    generated: datetime

    def to_json(self) -> Dict[str, Any]:
        return {
            "my_team": self.my_team,
            "my_team_score": self.my_team_score,
            "opponent_team": self.opponent_team,
            "opponent_team_score": self.opponent_team_score,
            "game_time": self.game_time.to_json(),
            "generated": self.generated.isoformat(),
        }

    def describe(self) -> str:
        return (
            f"{self.my_team} {self.my_team_score}:{self.opponent_team_score} {self.opponent_team} "
            f"game_time={self.game_time}"
        )


def write_snapshot(path: Path, snapshot: MatchSnapshot) -> None:
    """
    Overwrite `path` with the snapshot JSON. The file is replaced in one step,
    so readers never see a half-written document.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(snapshot.to_json(), ensure_ascii=False, indent=2)
    fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        os.replace(tmp, path)
    except BaseException:
        try:
            os.unlink(tmp)
        except FileNotFoundError:
            pass
        raise
