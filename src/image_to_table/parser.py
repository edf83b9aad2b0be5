# src/image_to_table/parser.py
from __future__ import annotations
import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple
from bs4 import BeautifulSoup
from .structures import Fragment, Point, parse_bbox, within_bbox

log = logging.getLogger(__name__)

LINE_CLASSES = ("ocr_line", "ocr_caption", "ocr_header", "ocr_textfloat")

def _load_soup(text: str) -> BeautifulSoup:
    """
    Intenta XML (lxml-xml) y, si no hay nodos HOCR, fallback a HTML (lxml).
    """
    soup_xml = BeautifulSoup(text, "lxml-xml")
    if soup_xml.find(class_=lambda c: c and "ocr_page" in c):
        return soup_xml
    return BeautifulSoup(text, "lxml")

def _is_line(classes: Any) -> bool:
    if not classes:
        return False
    if isinstance(classes, str):
        classes = classes.split()
    return any(c in LINE_CLASSES for c in classes)

def parse_hocr_lines(hocr_path: str,
                     *,
                     page: int = 1,
                     table_bbox: Optional[Tuple[int,int,int,int]] = None
                     ) -> List[Fragment]:
    """
    Extrae un Fragment por línea HOCR de la página `page` (base 1).
    El texto es la unión de sus `ocrx_word`; el rectángulo, el bbox de la línea.
    """
    with open(hocr_path, "r", encoding="utf-8") as f:
        raw = f.read()
    soup = _load_soup(raw)

    pages = soup.find_all(class_=lambda c: c and "ocr_page" in c)
    if not pages:
        log.warning("'%s' no contiene nodos ocr_page.", hocr_path)
        return []
    if not (1 <= page <= len(pages)):
        raise ValueError(f"Página {page} fuera de rango (el HOCR tiene {len(pages)}).")

    fragments: List[Fragment] = []
    for line in pages[page - 1].find_all(class_=_is_line):
        bb = parse_bbox(line.get("title", ""))
        if not bb:
            continue
        x1, y1, x2, y2 = bb
        if table_bbox and not within_bbox(table_bbox, x1, y1, x2, y2):
            continue

        words = line.find_all(class_=lambda c: c and "ocrx_word" in c)
        text = " ".join(t for t in ((w.get_text() or "").strip() for w in words) if t)
        if not text:
            continue
        fragments.append(Fragment.from_bbox(text, bb))

    log.info("Se leyeron %d líneas de la página %d de '%s'.", len(fragments), page, hocr_path)
    return fragments

def _point(value: Any) -> Point:
    if isinstance(value, Mapping):
        return Point(float(value["x"]), float(value["y"]))
    x, y = value
    return Point(float(x), float(y))

def fragments_from_records(records: Sequence[Dict[str, Any]]) -> List[Fragment]:
    """Convierte registros {text, top_left, bottom_right} o {text, bbox} en Fragments."""
    fragments: List[Fragment] = []
    for i, rec in enumerate(records):
        try:
            text = str(rec.get("text") or "")
            if "bbox" in rec:
                x1, y1, x2, y2 = (float(v) for v in rec["bbox"])
                fragments.append(Fragment(text, Point(x1, y1), Point(x2, y2)))
            else:
                fragments.append(Fragment(text, _point(rec["top_left"]), _point(rec["bottom_right"])))
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise ValueError(f"Registro {i} inválido: {rec!r} ({exc})") from exc
    return fragments

def load_fragments_json(json_path: str) -> List[Fragment]:
    with open(json_path, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, list):
        raise ValueError(f"'{json_path}' debe contener una lista de fragmentos.")
    fragments = fragments_from_records(data)
    log.info("Se leyeron %d fragmentos de '%s'.", len(fragments), json_path)
    return fragments
