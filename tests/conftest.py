"""Shared fixtures for deterministic move selection."""

from __future__ import annotations

from typing import List, Sequence

import pytest


class ScriptedRandom:
    """Stand-in random source: fixed coin flips and a fixed pick position."""

    def __init__(self, coin: float = 0.99, pick: int = 0) -> None:
        self.coin = coin
        self.pick = pick
        self.choices: List[List[int]] = []

    def random(self) -> float:
        return self.coin

    def choice(self, seq: Sequence[int]) -> int:
        self.choices.append(list(seq))
        return seq[self.pick]


@pytest.fixture
def scripted_rng():
    return ScriptedRandom
