from __future__ import annotations

from typing import List

import pytest

from image_to_table.structures import Fragment


def box(text: str, x1: float, y1: float, x2: float, y2: float) -> Fragment:
    return Fragment.from_bbox(text, (x1, y1, x2, y2))


@pytest.fixture
def jittered_grid() -> List[Fragment]:
    """Rejilla 4x3 con desalineación vertical de unos pocos píxeles."""
    jitter = [0, 3, -2, 1, -3, 2, 2, 0, -1, 3, 1, -2]
    frags = []
    for r in range(4):
        for c in range(3):
            j = jitter[r * 3 + c]
            y = 10 + r * 30 + j
            frags.append(box(f"r{r + 1}c{c + 1}" + "x" * c, c * 100, y, c * 100 + 60, y + 20))
    return frags
