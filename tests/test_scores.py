"""Tests for score tallies and their stored form."""

import json
from urllib.parse import unquote

import pytest
from pydantic import ValidationError

from tictactoe.game import Outcome
from tictactoe.scores import ScoreRecord, dump_record, load_record


def test_record_increments_matching_counter():
    scores = ScoreRecord()
    scores.record(Outcome.PLAYER_WIN)
    scores.record(Outcome.OPPONENT_WIN)
    scores.record(Outcome.OPPONENT_WIN)
    scores.record(Outcome.DRAW)
    assert (scores.player_wins, scores.opponent_wins, scores.draws) == (1, 2, 1)


def test_in_progress_is_not_recorded():
    with pytest.raises(ValueError):
        ScoreRecord().record(Outcome.IN_PROGRESS)


def test_counters_cannot_go_negative():
    with pytest.raises(ValidationError):
        ScoreRecord(playerScore=-1)


def test_dump_uses_browser_field_names():
    raw = dump_record(ScoreRecord(player_wins=3, opponent_wins=1, draws=2))
    assert json.loads(unquote(raw)) == {"playerScore": 3, "computerScore": 1, "drawScore": 2}
    assert load_record(raw) == ScoreRecord(player_wins=3, opponent_wins=1, draws=2)


def test_plain_json_record_is_accepted():
    record = load_record('{"playerScore": 4, "computerScore": 0, "drawScore": 7}')
    assert record.player_wins == 4
    assert record.draws == 7


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "",
        "not json",
        "%7B%22playerScore",
        "[1, 2, 3]",
        '{"playerScore": -2, "computerScore": 0, "drawScore": 0}',
        '{"playerScore": "many"}',
    ],
)
def test_unreadable_record_falls_back_to_zero(raw):
    assert load_record(raw) == ScoreRecord()
