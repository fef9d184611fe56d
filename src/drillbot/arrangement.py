from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Sequence

logger = logging.getLogger(__name__)


class Zone(str, Enum):
    POOL = "pool"
    ASSEMBLED = "assembled"


@dataclass(frozen=True)
class ChipBox:
    """Rendered horizontal extent of one word chip."""

    left: float
    width: float

    @property
    def midpoint(self) -> float:
        return self.left + self.width / 2


def resolve_drop_index(pointer_x: float, boxes: Sequence[ChipBox]) -> int:
    """Insertion index for a drop at pointer_x over chips in rendered order.

    The first chip whose midpoint lies right of the pointer receives the drop in
    front of it; past the last midpoint the drop goes to the end.
    """
    for idx, box in enumerate(boxes):
        if pointer_x < box.midpoint:
            return idx
    return len(boxes)


class ArrangementEngine:
    """Two ordered word zones that exchange chips without creating or losing any.

    Every mutation is a pop from one sequence followed by an insert into one
    sequence, so the combined multiset of words never changes.
    """

    def __init__(self, jumbled_words: Iterable[str]) -> None:
        words = [str(w) for w in jumbled_words]
        self._original = Counter(words)
        self._zones: dict[Zone, list[str]] = {Zone.POOL: words, Zone.ASSEMBLED: []}
        self._locked = False

    @property
    def pool(self) -> tuple[str, ...]:
        return tuple(self._zones[Zone.POOL])

    @property
    def assembled(self) -> tuple[str, ...]:
        return tuple(self._zones[Zone.ASSEMBLED])

    @property
    def locked(self) -> bool:
        return self._locked

    def zone(self, zone: Zone) -> tuple[str, ...]:
        return tuple(self._zones[zone])

    def move_within_zone(self, zone: Zone, from_index: int, to_index: int) -> bool:
        if self._locked:
            return False
        seq = self._zones[zone]
        if not (0 <= from_index < len(seq)) or not (0 <= to_index <= len(seq)):
            return False
        word = seq.pop(from_index)
        seq.insert(to_index, word)
        return True

    def move_between_zones(
        self,
        from_zone: Zone,
        from_index: int,
        to_zone: Zone,
        to_index: int,
    ) -> bool:
        if from_zone == to_zone:
            return self.move_within_zone(from_zone, from_index, to_index)
        if self._locked:
            return False
        src = self._zones[from_zone]
        dst = self._zones[to_zone]
        if not (0 <= from_index < len(src)) or not (0 <= to_index <= len(dst)):
            return False
        word = src.pop(from_index)
        dst.insert(to_index, word)
        return True

    def drop(
        self,
        from_zone: Zone,
        from_index: int,
        to_zone: Zone,
        pointer_x: float,
        boxes: Sequence[ChipBox],
    ) -> bool:
        to_index = resolve_drop_index(pointer_x, boxes)
        return self.move_between_zones(from_zone, from_index, to_zone, to_index)

    # tap-to-place gestures
    def place(self, pool_index: int) -> bool:
        return self.move_between_zones(
            Zone.POOL, pool_index, Zone.ASSEMBLED, len(self._zones[Zone.ASSEMBLED])
        )

    def unplace(self, assembled_index: int) -> bool:
        return self.move_between_zones(
            Zone.ASSEMBLED, assembled_index, Zone.POOL, len(self._zones[Zone.POOL])
        )

    def clear(self) -> bool:
        moved = False
        while self._zones[Zone.ASSEMBLED]:
            if not self.unplace(0):
                break
            moved = True
        return moved

    def lock(self) -> None:
        self._locked = True

    def reveal(self, canonical_tokens: Sequence[str]) -> None:
        """Rebuild the answer in canonical order from the existing chips and lock.

        Chips are matched to canonical tokens case-insensitively and keep their
        own spelling, so the multiset of words never changes; the canonical
        sentence text itself is shown in the reveal feedback. Any chip left
        unmatched is appended so nothing is dropped.
        """
        remaining = self._zones[Zone.POOL] + self._zones[Zone.ASSEMBLED]
        ordered: list[str] = []
        for token in canonical_tokens:
            for idx, word in enumerate(remaining):
                if word.lower() == token.lower():
                    ordered.append(remaining.pop(idx))
                    break
        if remaining:
            logger.warning("arrangement_reveal_unmatched count=%s", len(remaining))
            ordered.extend(remaining)
        self._zones[Zone.ASSEMBLED] = ordered
        self._zones[Zone.POOL] = []
        self._locked = True

    def check_invariant(self) -> bool:
        current = Counter(self._zones[Zone.POOL]) + Counter(self._zones[Zone.ASSEMBLED])
        return current == self._original
