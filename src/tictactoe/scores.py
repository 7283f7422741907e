"""Win/loss/draw tallies and their cookie encoding."""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import quote, unquote

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .game import Outcome

logger = logging.getLogger(__name__)

COOKIE_NAME = "game_record"
COOKIE_MAX_AGE = 7 * 24 * 60 * 60  # 7 days


class ScoreRecord(BaseModel):
    """Three non-negative counters, serialized with the browser-side field names."""

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    player_wins: int = Field(default=0, ge=0, alias="playerScore")
    opponent_wins: int = Field(default=0, ge=0, alias="computerScore")
    draws: int = Field(default=0, ge=0, alias="drawScore")

    def record(self, outcome: Outcome) -> None:
        if outcome is Outcome.PLAYER_WIN:
            self.player_wins += 1
        elif outcome is Outcome.OPPONENT_WIN:
            self.opponent_wins += 1
        elif outcome is Outcome.DRAW:
            self.draws += 1
        else:
            raise ValueError("Only finished games can be recorded")

    def clear(self) -> None:
        self.player_wins = 0
        self.opponent_wins = 0
        self.draws = 0


def dump_record(record: ScoreRecord) -> str:
    return quote(record.model_dump_json(by_alias=True), safe="")


def load_record(raw: Optional[str]) -> ScoreRecord:
    """Decode a stored record, falling back to zeroed scores on any failure."""
    if not raw:
        return ScoreRecord()
    try:
        return ScoreRecord.model_validate_json(unquote(raw))
    except ValidationError as exc:
        logger.warning("Discarding unreadable score record: %s", exc.errors()[0]["msg"])
        return ScoreRecord()
