# restaurant_wheel/services/wheel.py
from __future__ import annotations

import random
from typing import Sequence, TypeVar

from ..errors import ValidationError

T = TypeVar("T")


def spin(restaurants: Sequence[T], rng: random.Random) -> T:
    """
    Pick one restaurant uniformly at random. Nothing is written; the admin
    confirms the pick separately, so a spin can be redone freely.
    """
    if not restaurants:
        raise ValidationError("No active restaurants available")
    return restaurants[rng.randrange(len(restaurants))]


def make_rng(seed=None) -> random.Random:
    if seed is None or seed == "":
        return random.SystemRandom()
    return random.Random(seed)
