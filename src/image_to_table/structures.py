# src/image_to_table/structures.py
from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Optional, Sequence, Tuple
import math
import re

BBOX_RE = re.compile(r"bbox (-?\d+)\s+(-?\d+)\s+(-?\d+)\s+(-?\d+)")

def parse_bbox(title_attr: str) -> Optional[Tuple[int, int, int, int]]:
    if not title_attr:
        return None
    m = BBOX_RE.search(title_attr)
    if not m:
        return None
    x1, y1, x2, y2 = map(int, m.groups())
    return x1, y1, x2, y2

def within_bbox(bbox: Tuple[int,int,int,int], x1:int,y1:int,x2:int,y2:int) -> bool:
    X1, Y1, X2, Y2 = bbox
    return (x1 >= X1 and y1 >= Y1 and x2 <= X2 and y2 <= Y2)

@dataclass(frozen=True)
class Point:
    """Punto en el plano de la imagen (píxeles)."""
    x: float
    y: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.x) and math.isfinite(self.y)):
            raise ValueError(f"Coordenadas no finitas: ({self.x}, {self.y})")

@dataclass(frozen=True)
class Fragment:
    """Texto reconocido con su rectángulo.

    No se valida que el rectángulo esté bien orientado: una caja invertida
    se acepta tal cual.
    """
    text: str
    top_left: Point
    bottom_right: Point

    @classmethod
    def from_bbox(cls, text: str, bbox: Sequence[float]) -> "Fragment":
        x1, y1, x2, y2 = bbox
        return cls(text=text, top_left=Point(x1, y1), bottom_right=Point(x2, y2))

    @property
    def top(self) -> int:
        return int(self.top_left.y)

    @property
    def left(self) -> int:
        return int(self.top_left.x)

    @property
    def bottom(self) -> int:
        return int(self.bottom_right.y)

    @property
    def right(self) -> int:
        return int(self.bottom_right.x)

    def labeled(self) -> "LabeledFragment":
        return LabeledFragment(fragment=self)

@dataclass(frozen=True)
class LabeledFragment:
    """Fragmento con fila y columna (base 1; 0 = sin asignar)."""
    fragment: Fragment
    row: int = 0
    column: int = 0

    @property
    def text(self) -> str:
        return self.fragment.text

    @property
    def top(self) -> int:
        return self.fragment.top

    @property
    def left(self) -> int:
        return self.fragment.left

    @property
    def bottom(self) -> int:
        return self.fragment.bottom

    @property
    def right(self) -> int:
        return self.fragment.right

    def with_row(self, row: int) -> "LabeledFragment":
        return replace(self, row=row)

    def with_column(self, column: int) -> "LabeledFragment":
        return replace(self, column=column)

    def __str__(self) -> str:
        tl, br = self.fragment.top_left, self.fragment.bottom_right
        return f"({self.text}, ({tl.x}, {tl.y}), ({br.x}, {br.y}), R: {self.row}  C: {self.column})"
