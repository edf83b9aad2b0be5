from __future__ import annotations

import os
from dataclasses import dataclass

NEWLINES = {"lf": "\n", "crlf": "\r\n", "cr": "\r", "native": os.linesep}
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(frozen=True)
class TableConfig:
    """
    Parámetros de salida de la tabla.

    `newline` es el terminador de cada línea dibujada; por defecto el de la plataforma.
    """

    newline: str = os.linesep
    loglevel: str = "INFO"

    @classmethod
    def from_names(cls, newline: str = "native", loglevel: str = "INFO") -> "TableConfig":
        if newline not in NEWLINES:
            raise ValueError(f"Terminador desconocido: {newline!r} (opciones: {', '.join(NEWLINES)})")
        cfg = cls(newline=NEWLINES[newline], loglevel=loglevel)
        cfg.validate()
        return cfg

    def validate(self) -> None:
        if self.newline not in ("\n", "\r\n", "\r"):
            raise ValueError("newline debe ser '\\n', '\\r\\n' o '\\r'")
        if self.loglevel not in LOG_LEVELS:
            raise ValueError(f"loglevel debe ser uno de {LOG_LEVELS}")
