from __future__ import annotations

from typing import Iterator, Tuple


def scan_order(floor: int, num_floors: int) -> Iterator[Tuple[int, int]]:
    """Yield ``(offset, candidate_floor)`` pairs for an idle car's hall-call search.

    Offsets grow from 1 to ``num_floors - 1``. At each offset the floor above
    is offered before the floor below, so at equal distance the higher floor
    wins. Candidates outside the shaft are skipped and the pass is finite.
    """

    for offset in range(1, num_floors):
        above = floor + offset
        if above < num_floors:
            yield offset, above
        below = floor - offset
        if below >= 0:
            yield -offset, below
