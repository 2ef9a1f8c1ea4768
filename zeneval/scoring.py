# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2026 The ZenEval Project Developers

"""Scoring of individual answers.

A scorer maps the maximum marks of a question to a ``(marks, remark)``
pair.  The only scorer we ship is :class:`RandomScorer`, a placeholder
that draws the marks uniformly and picks one of a few canned remarks
without looking at the answer at all.  A genuine algorithm plugs in by
subclassing :class:`BaseScorer` and registering itself in ``scorers``;
nothing in the evaluation pipeline needs to change.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import random


canned_remarks = (
    "Good attempt with clear explanations",
    "Excellent work with minor calculation errors",
    "Needs improvement in methodology",
    "Outstanding performance across all sections",
    "Partial credit for showing work steps",
    "Well structured answers with good reasoning",
)


def check_max_marks(max_marks) -> int:
    """Make sure a maximum mark is a non-negative integer.

    Raises:
        TypeError: not an integer (bools are not integers here).
        ValueError: negative.
    """
    if isinstance(max_marks, bool) or not isinstance(max_marks, int):
        raise TypeError(f"maximum marks must be an integer, not {max_marks!r}")
    if max_marks < 0:
        raise ValueError(f"maximum marks cannot be negative: {max_marks}")
    return max_marks


class BaseScorer(ABC):
    """Abstract base class for all scorers."""

    name = None

    @abstractmethod
    def score(self, max_marks: int) -> tuple[int, str]:
        """Return ``(marks, remark)`` with marks in ``[0, max_marks]``."""
        pass


class RandomScorer(BaseScorer):
    """Placeholder scorer: uniform random marks and a random canned remark.

    Args:
        rng (random.Random/None): source of randomness, mostly so tests
            can seed it.  A fresh generator is used if omitted.
    """

    name = "random"

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng if rng is not None else random.Random()

    def score(self, max_marks: int) -> tuple[int, str]:
        max_marks = check_max_marks(max_marks)
        marks = self.rng.randint(0, max_marks)
        remark = self.rng.choice(canned_remarks)
        return marks, remark


scorers = {
    RandomScorer.name: RandomScorer,
}


def get_scorer(name: str = "random", **kwargs) -> BaseScorer:
    """Build a scorer instance from its name.

    Args:
        name: currently only ``"random"``.
        **kwargs: passed to the scorer's constructor.

    Raises:
        ValueError: no scorer of that name.
    """
    try:
        cls = scorers[name.lower()]
    except KeyError:
        raise ValueError(
            f'Unknown scorer "{name}": choose from {sorted(scorers)}'
        ) from None
    return cls(**kwargs)


def score(max_marks: int) -> tuple[int, str]:
    """Score one answer worth at most ``max_marks`` with the placeholder scorer."""
    return RandomScorer().score(max_marks)
