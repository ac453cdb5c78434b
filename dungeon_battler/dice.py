"""Random primitives. Every roll in combat is drawn through a ``Dice``."""
from __future__ import annotations

import logging
import random
from collections import deque
from typing import Deque, Iterable, List, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def roll(dice: str, r: random.Random) -> int:
    # supports "d6", "d20" etc.
    if not dice.startswith("d"):
        raise ValueError("dice must be like 'd20'")
    sides = int(dice[1:])
    return r.randint(1, sides)


class Dice:
    """Seeded die roller shared by the resolver, targeting and progression."""

    def __init__(self, seed: Optional[int] = None) -> None:
        self.seed = seed
        self.rng = random.Random(seed)

    def d20(self) -> int:
        return roll("d20", self.rng)

    def d6(self) -> int:
        return roll("d6", self.rng)

    def chance(self) -> float:
        """Uniform float in [0, 1). A proc happens when it is below the odds."""
        return self.rng.random()

    def randint(self, low: int, high: int) -> int:
        return self.rng.randint(low, high)

    def choice(self, items: Sequence[T]) -> T:
        return items[self.rng.randrange(len(items))]

    def shuffle(self, items: Iterable[T]) -> List[T]:
        """Return a shuffled copy, leaving the input untouched."""
        result = list(items)
        self.rng.shuffle(result)
        return result


class ScriptedDice(Dice):
    """Replays queued rolls, for tests and deterministic replays.

    Each kind of roll has its own queue. An exhausted queue falls back to a
    neutral value: d20 -> 10, d6 -> 1, chance -> 1.0 (never procs),
    randint -> low, choice -> first item, shuffle -> original order.
    """

    def __init__(
        self,
        d20: Iterable[int] = (),
        d6: Iterable[int] = (),
        chance: Iterable[float] = (),
        randint: Iterable[int] = (),
        choice: Iterable[int] = (),
    ) -> None:
        super().__init__(seed=0)
        self.d20_rolls: Deque[int] = deque(d20)
        self.d6_rolls: Deque[int] = deque(d6)
        self.chance_rolls: Deque[float] = deque(chance)
        self.randint_rolls: Deque[int] = deque(randint)
        self.choice_indexes: Deque[int] = deque(choice)
        self.history: List[tuple] = []

    def d20(self) -> int:
        value = self.d20_rolls.popleft() if self.d20_rolls else 10
        self.history.append(("d20", value))
        return value

    def d6(self) -> int:
        value = self.d6_rolls.popleft() if self.d6_rolls else 1
        self.history.append(("d6", value))
        return value

    def chance(self) -> float:
        value = self.chance_rolls.popleft() if self.chance_rolls else 1.0
        self.history.append(("chance", value))
        return value

    def randint(self, low: int, high: int) -> int:
        value = self.randint_rolls.popleft() if self.randint_rolls else low
        self.history.append(("randint", value))
        return max(low, min(high, value))

    def choice(self, items: Sequence[T]) -> T:
        index = self.choice_indexes.popleft() if self.choice_indexes else 0
        self.history.append(("choice", index))
        return items[index % len(items)]

    def shuffle(self, items: Iterable[T]) -> List[T]:
        return list(items)
