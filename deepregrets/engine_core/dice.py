"""
Dice & Catch Resolver - Pure functions over die faces.

Rolling takes an explicit random.Random so callers control determinism.
Everything else is arithmetic: a catch succeeds when the total reaches
the difficulty, and the bots use the same functions to turn a candidate
catch into a success probability.
"""

from __future__ import annotations
import random
from collections.abc import Sequence

D6_FACES: tuple[int, ...] = (1, 2, 3, 4, 5, 6)


def roll_dice(rng: random.Random, count: int, reroll_ones: bool = False) -> tuple[int, ...]:
    """Roll `count` d6. With reroll_ones, each 1 is rerolled once."""
    faces = []
    for _ in range(count):
        value = rng.randint(1, 6)
        if reroll_ones and value == 1:
            value = rng.randint(1, 6)
        faces.append(value)
    return tuple(faces)


def roll_faces(rng: random.Random, faces: Sequence[int]) -> int:
    """Roll one custom-faced die (tackle die)."""
    return rng.choice(list(faces))


def catch_succeeds(total: int, difficulty: int) -> bool:
    """Sum exactly equal to the difficulty is a success."""
    return total >= difficulty


def effective_difficulty(base: int, modifier: int = 0, discount: int = 0) -> int:
    """Fish difficulty after permanent modifiers and one-shot discounts, floored at 0."""
    return max(0, base - modifier - discount)


def sum_distribution(dice: Sequence[Sequence[int]]) -> dict[int, float]:
    """
    Probability distribution of the sum of independent dice.

    Each die is given as its list of equally likely faces.
    An empty sequence yields {0: 1.0}.
    """
    dist: dict[int, float] = {0: 1.0}
    for faces in dice:
        if not faces:
            continue
        p_face = 1.0 / len(faces)
        nxt: dict[int, float] = {}
        for total, p in dist.items():
            for face in faces:
                nxt[total + face] = nxt.get(total + face, 0.0) + p * p_face
        dist = nxt
    return dist


def success_probability(
    fixed_total: int,
    difficulty: int,
    random_dice: Sequence[Sequence[int]] = (),
) -> float:
    """P(fixed_total + sum(random_dice) >= difficulty)."""
    dist = sum_distribution(random_dice)
    return sum(p for total, p in dist.items() if catch_succeeds(fixed_total + total, difficulty))


def reroll_success_probability(dice_count: int, bonus: int, difficulty: int) -> float:
    """Chance that rerolling `dice_count` d6 plus bonus reaches the difficulty."""
    return success_probability(bonus, difficulty, [D6_FACES] * dice_count)


def descend_dice(fresh: Sequence[int], levels: int, threshold: int) -> list[int] | None:
    """
    Indices of the dice paying for a descent of `levels` depths.

    One die showing at least `threshold` per level, taken in pool order.
    Returns None when the pool cannot pay.
    """
    if levels <= 0:
        return []
    chosen = [i for i, value in enumerate(fresh) if value >= threshold][:levels]
    return chosen if len(chosen) == levels else None


def lowest_die_index(dice: Sequence[int]) -> int | None:
    """Index of the lowest die, first one on ties."""
    if not dice:
        return None
    return min(range(len(dice)), key=lambda i: dice[i])


def split_dice(fresh: Sequence[int], indices: Sequence[int]) -> tuple[tuple[int, ...], tuple[int, ...]]:
    """Return (used, remaining) for distinct valid indices, preserving pool order."""
    picked = set(indices)
    used = tuple(fresh[i] for i in indices)
    remaining = tuple(v for i, v in enumerate(fresh) if i not in picked)
    return used, remaining
