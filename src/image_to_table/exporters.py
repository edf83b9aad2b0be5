# src/image_to_table/exporters.py
from __future__ import annotations
from typing import Dict, List, Sequence
import csv

import pandas as pd

from .render import index_cells
from .structures import LabeledFragment

def grid_rows(labeled: Sequence[LabeledFragment]) -> List[List[str]]:
    """Rejilla fila-mayor con "" en las celdas vacías."""
    if not labeled:
        return []
    n_rows = max(f.row for f in labeled)
    n_cols = max(f.column for f in labeled)
    cells = index_cells(labeled)
    return [[cells[(r, c)].text if (r, c) in cells else "" for c in range(1, n_cols + 1)]
            for r in range(1, n_rows + 1)]

def _unique_header(names: Sequence[str]) -> List[str]:
    seen: Dict[str, int] = {}
    header = []
    for i, name in enumerate(names):
        name = name.strip() or f"col_{i+1}"
        if name in seen:
            seen[name] += 1
            name = f"{name}_{seen[name]}"
        else:
            seen[name] = 0
        header.append(name)
    return header

def grid_to_dataframe(labeled: Sequence[LabeledFragment]) -> pd.DataFrame:
    """La fila 1 es la cabecera, el resto el cuerpo."""
    rows = grid_rows(labeled)
    if not rows:
        return pd.DataFrame()
    return pd.DataFrame(rows[1:], columns=_unique_header(rows[0]), dtype=str)

def rows_to_csv(rows: List[List[str]], header: List[str], csv_path: str) -> None:
    with open(csv_path, "w", encoding="utf-8-sig", newline="") as f:
        w = csv.writer(f)
        if header:
            w.writerow(header)
        w.writerows(rows)
