# src/image_to_table/render.py
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

from .config import TableConfig
from .structures import LabeledFragment

log = logging.getLogger(__name__)

def column_widths(labeled: Sequence[LabeledFragment]) -> List[int]:
    """Ancho de cada columna (1..max) = texto más largo en caracteres."""
    widths: Dict[int, int] = defaultdict(int)
    for f in labeled:
        widths[f.column] = max(widths[f.column], len(f.text))
    n_cols = max(widths) if widths else 0
    return [widths[c] for c in range(1, n_cols + 1)]

def index_cells(labeled: Sequence[LabeledFragment]) -> Dict[Tuple[int, int], LabeledFragment]:
    """Mapa (fila, columna) -> fragmento.

    Si dos cajas solapadas caen en la misma celda se queda la primera por
    (left, top, text), así la salida no depende del orden de entrada.
    """
    cells: Dict[Tuple[int, int], LabeledFragment] = {}
    for f in sorted(labeled, key=lambda z: (z.left, z.top, z.text)):
        key = (f.row, f.column)
        if key in cells:
            log.warning("Celda R%d C%d repetida: se descarta '%s' (se conserva '%s').",
                        f.row, f.column, f.text, cells[key].text)
            continue
        cells[key] = f
    return cells

def border_line(widths: Sequence[int], newline: str) -> str:
    return "".join("+" + "-" * (w + 2) for w in widths) + "+" + newline

def format_row(cells: Dict[Tuple[int, int], LabeledFragment],
               row: int,
               widths: Sequence[int],
               newline: str) -> str:
    parts: List[str] = []
    for col, w in enumerate(widths, start=1):
        cell = cells.get((row, col))
        text = cell.text if cell is not None else ""
        parts.append("| " + text.ljust(w) + " ")
    parts.append("|" + newline)
    return "".join(parts)

def render(labeled: Sequence[LabeledFragment],
           row_count: int,
           *,
           newline: Optional[str] = None) -> str:
    """
    Dibuja la tabla: borde, cabecera (fila 1), borde, filas 2..row_count, borde.

    Con row_count == 0 (o sin fragmentos) devuelve la cadena vacía.
    """
    if row_count <= 0 or not labeled:
        return ""
    nl = TableConfig().newline if newline is None else newline

    widths = column_widths(labeled)
    cells = index_cells(labeled)
    border = border_line(widths, nl)

    lines: List[str] = [border, format_row(cells, 1, widths, nl), border]
    for row in range(2, row_count + 1):
        lines.append(format_row(cells, row, widths, nl))
    lines.append(border)
    return "".join(lines)
