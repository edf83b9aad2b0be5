from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import LOG_LEVELS, NEWLINES, TableConfig
from .exporters import grid_rows, rows_to_csv
from .main import NoTextFoundError, build_grid
from .parser import load_fragments_json, parse_hocr_lines
from .render import render

log = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="image-to-table",
        description="Reconstruye una tabla de texto a partir de líneas OCR (hOCR o JSON).",
    )
    parser.add_argument("input", type=str, help="Archivo .hocr o .json con los fragmentos reconocidos")
    parser.add_argument("--format", choices=["hocr", "json"], help="Formato de entrada (por defecto, según la extensión)")
    parser.add_argument("--page", type=int, default=1, help="Página HOCR a procesar (base 1, default: 1)")
    parser.add_argument("--bbox", type=int, nargs=4, metavar=("X1", "Y1", "X2", "Y2"),
                        help="Bbox opcional de la tabla: x1 y1 x2 y2 (solo HOCR)")
    parser.add_argument("--newline", choices=list(NEWLINES), default="native",
                        help="Terminador de línea de la tabla (default: native)")
    parser.add_argument("--output", type=str, help="Ruta de salida para la tabla (default: stdout)")
    parser.add_argument("--csv", type=str, help="Ruta opcional para guardar la rejilla como CSV")
    parser.add_argument("--loglevel", default="INFO", choices=list(LOG_LEVELS))
    args = parser.parse_args(argv)

    # --- Validación de argumentos ---
    if not args.format:
        args.format = "json" if Path(args.input).suffix.lower() == ".json" else "hocr"
    if args.format == "json" and args.bbox:
        parser.error("--bbox solo se admite con entrada HOCR")
    return args


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    cfg = TableConfig.from_names(newline=args.newline, loglevel=args.loglevel)
    logging.basicConfig(level=cfg.loglevel, format="%(asctime)s - %(levelname)s - %(message)s")

    fmt = args.format
    log.info("Entrada: %s (%s)", args.input, fmt)

    try:
        if fmt == "json":
            fragments = load_fragments_json(args.input)
        else:
            fragments = parse_hocr_lines(args.input, page=args.page,
                                         table_bbox=tuple(args.bbox) if args.bbox else None)
        labeled, row_count = build_grid(fragments, source=args.input)
        table = render(labeled, row_count, newline=cfg.newline)

        if args.output:
            Path(args.output).parent.mkdir(parents=True, exist_ok=True)
            with open(args.output, "w", encoding="utf-8", newline="") as fh:
                fh.write(table)
            log.info("Tabla guardada en %s", args.output)
        else:
            sys.stdout.write(table)

        if args.csv:
            Path(args.csv).parent.mkdir(parents=True, exist_ok=True)
            rows = grid_rows(labeled)
            rows_to_csv(rows[1:], rows[0], args.csv)
            log.info("CSV guardado en %s", args.csv)
    except NoTextFoundError as e:
        print(str(e), file=sys.stderr)
        return 1
    except FileNotFoundError:
        log.error("No se encontró el archivo de entrada: %s", args.input)
        return 1
    except ValueError as e:
        log.error("Entrada inválida: %s", e)
        return 2
    except Exception as e:
        log.error("Ocurrió un error inesperado: %s", e, exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
