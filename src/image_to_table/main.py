from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from .grid import assign_grid
from .parser import load_fragments_json, parse_hocr_lines
from .render import render
from .structures import Fragment, LabeledFragment

log = logging.getLogger(__name__)


class NoTextFoundError(ValueError):
    """La entrada no contiene ningún fragmento de texto."""

    def __init__(self, source: Optional[str] = None) -> None:
        self.source = source
        msg = "No se encontró texto" + (f" en '{source}'" if source else "")
        super().__init__(msg)


def build_grid(fragments: Sequence[Fragment], *, source: Optional[str] = None) -> Tuple[List[LabeledFragment], int]:
    if not fragments:
        raise NoTextFoundError(source)
    labeled, row_count = assign_grid(fragments)
    log.info("Rejilla de %d filas para %d fragmentos.", row_count, len(labeled))
    return labeled, row_count


def fragments_to_table(
    fragments: Sequence[Fragment],
    *,
    newline: Optional[str] = None,
    source: Optional[str] = None,
) -> str:
    labeled, row_count = build_grid(fragments, source=source)
    return render(labeled, row_count, newline=newline)


def hocr_to_table(
    hocr_path: str,
    *,
    page: int = 1,
    table_bbox: Optional[Tuple[int, int, int, int]] = None,
    newline: Optional[str] = None,
) -> str:
    fragments = parse_hocr_lines(hocr_path, page=page, table_bbox=table_bbox)
    return fragments_to_table(fragments, newline=newline, source=hocr_path)


def json_to_table(json_path: str, *, newline: Optional[str] = None) -> str:
    fragments = load_fragments_json(json_path)
    return fragments_to_table(fragments, newline=newline, source=json_path)
