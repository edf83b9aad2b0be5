# src/image_to_table/grid.py
from __future__ import annotations
import logging
from typing import Callable, List, Sequence, Tuple, Union

import numpy as np

from .structures import Fragment, LabeledFragment

log = logging.getLogger(__name__)

FragmentLike = Union[Fragment, LabeledFragment]

def _as_labeled(fragments: Sequence[FragmentLike]) -> List[LabeledFragment]:
    return [f if isinstance(f, LabeledFragment) else f.labeled() for f in fragments]

def _sweep_order(primary: Sequence[int], secondary: Sequence[int]) -> np.ndarray:
    """Orden estable por (primary, secondary); los empates conservan el orden de entrada.

    Con float64 no hay desbordamiento para coordenadas enormes; enteros que
    colapsan al mismo valor se desempatan por orden de entrada.
    """
    return np.lexsort((np.asarray(secondary, dtype=np.float64), np.asarray(primary, dtype=np.float64)))

def _sweep(starts: Sequence[int], ends: Sequence[int], order: np.ndarray) -> Tuple[List[int], int]:
    """Barrido 1-D: agrupa intervalos que solapan la banda acumulada.

    Devuelve la etiqueta (base 1) de cada posición de entrada y el número de bandas.
    """
    labels = [0] * len(starts)
    watermark = 0
    band = 0
    for i in order:
        # el primero siempre abre banda, aunque empiece en 0 o en negativo
        if band == 0 or starts[i] > watermark:
            band += 1
        labels[i] = band
        # una caja invertida nunca hace retroceder la marca
        watermark = max(watermark, ends[i])
    return labels, band

def _assign_axis(fragments: Sequence[FragmentLike],
                 start: Callable[[LabeledFragment], int],
                 end: Callable[[LabeledFragment], int],
                 tie: Callable[[LabeledFragment], int],
                 ) -> Tuple[List[LabeledFragment], List[int], int]:
    items = _as_labeled(fragments)
    if not items:
        return [], [], 0
    starts = [start(f) for f in items]
    ends = [end(f) for f in items]
    order = _sweep_order(starts, [tie(f) for f in items])
    labels, count = _sweep(starts, ends, order)
    return items, labels, count

def assign_rows(fragments: Sequence[FragmentLike]) -> Tuple[List[LabeledFragment], int]:
    """Asigna filas ordenando por (top, left) y barriendo en vertical."""
    items, labels, count = _assign_axis(fragments,
                                        start=lambda f: f.top,
                                        end=lambda f: f.bottom,
                                        tie=lambda f: f.left)
    return [f.with_row(r) for f, r in zip(items, labels)], count

def assign_columns(fragments: Sequence[FragmentLike]) -> Tuple[List[LabeledFragment], int]:
    """Asigna columnas ordenando por (left, top) y barriendo en horizontal."""
    items, labels, count = _assign_axis(fragments,
                                        start=lambda f: f.left,
                                        end=lambda f: f.right,
                                        tie=lambda f: f.top)
    return [f.with_column(c) for f, c in zip(items, labels)], count

def assign_grid(fragments: Sequence[FragmentLike]) -> Tuple[List[LabeledFragment], int]:
    """
    Asigna fila y columna a cada fragmento.

    No modifica la entrada: devuelve nuevos LabeledFragment en el mismo orden
    que `fragments`, junto con el número de filas. Con entrada vacía devuelve ([], 0).
    """
    rows, row_count = assign_rows(fragments)
    labeled, column_count = assign_columns(rows)
    log.debug("Rejilla inferida: %d filas x %d columnas (%d fragmentos).",
              row_count, column_count, len(labeled))
    return labeled, row_count
