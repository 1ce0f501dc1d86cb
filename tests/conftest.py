"""Shared association payloads."""

from __future__ import annotations

import pytest

BANK_PAYLOAD = {
    "word": "bank",
    "left": {"river": {"count": 3, "the": {"count": 2}}},
    "right": {"account": {"count": 5}},
}

# Two levels of context on each side, several branches per level.
DEEP_PAYLOAD = {
    "word": "data",
    "left": {
        "big": {"count": 4, "the": {"count": 3, "on": {"count": 1}}, "of": {"count": 1}},
        "raw": {"count": 2, "the": {"count": 2}},
        "training": {"count": 1},
    },
    "right": {
        "science": {"count": 6, "is": {"count": 3, "hard": {"count": 1}}, "and": {"count": 2}},
        "set": {"count": 2},
        "points": {"count": 1, "are": {"count": 1}},
    },
}


@pytest.fixture
def bank_payload() -> dict:
    return BANK_PAYLOAD


@pytest.fixture
def deep_payload() -> dict:
    return DEEP_PAYLOAD
