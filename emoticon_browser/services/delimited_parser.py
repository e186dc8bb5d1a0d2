"""
Parser for the comma/tab separated datasets.

The delimiter is picked once from the header line: tab if it has one,
comma otherwise. Lines break on ``\\r\\n`` or ``\\n`` only; a lone ``\\r``
stays inside the value. A quoted field may contain delimiters, doubled
quotes ("") and line breaks. A quote that is never closed is kept as
literal text on its own line, so one bad row cannot swallow the rest.
"""
from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Tuple
import csv
import logging
import re

logger = logging.getLogger("uvicorn")

RawRow = Dict[str, str]

BOM = "\ufeff"
LINE_BREAK = re.compile(r"\r?\n")
CR = "\r"


def detect_delimiter(header_line: str) -> str:
    return "\t" if "\t" in header_line else ","


def _opens_quote(line: str) -> bool:
    return line.count('"') % 2 == 1


def _cr_placeholder(text: str) -> str:
    # Private use code point absent from the text; csv.reader treats a bare CR as a record end.
    code = 0xE000
    while chr(code) in text:
        code += 1
    return chr(code)


def _logical_records(lines: List[str]) -> Iterator[Tuple[str, bool]]:
    """
    Agrupa linhas físicas em registros lógicos.

    Um registro continua enquanto houver aspas abertas e termina na próxima
    linha com número ímpar de aspas. Sem fechamento até o fim do texto, a
    linha é devolvida sozinha e marcada como literal.
    """
    next_open: List[Optional[int]] = [None] * (len(lines) + 1)
    for i in range(len(lines) - 1, -1, -1):
        next_open[i] = i if _opens_quote(lines[i]) else next_open[i + 1]

    i = 0
    while i < len(lines):
        if not _opens_quote(lines[i]):
            yield lines[i], False
            i += 1
            continue
        close = next_open[i + 1]
        if close is None:
            yield lines[i], True
            i += 1
            continue
        yield "\n".join(lines[i:close + 1]), False
        i = close + 1


def _split_record(record: str, delimiter: str, literal: bool) -> List[str]:
    if literal:
        return record.split(delimiter)
    placeholder = _cr_placeholder(record)
    try:
        fields = next(csv.reader([record.replace(CR, placeholder)], delimiter=delimiter), [])
    except csv.Error as exc:
        logger.warning("[DelimitedParser] Registro mal formado lido como texto literal: %s", exc)
        return record.split(delimiter)
    return [f.replace(placeholder, CR) for f in fields]


def parse_delimited(text: str) -> List[RawRow]:
    """
    Converte texto CSV/TSV em uma lista de dicionários indexados pelo cabeçalho.

    Args:
        text: Conteúdo bruto do arquivo (UTF-8, BOM opcional)

    Returns:
        Lista de linhas; valores sempre como string, sem espaços nas pontas
    """
    raw = (text or "").lstrip(BOM).strip()
    if not raw:
        return []

    lines = LINE_BREAK.split(raw)
    delimiter = detect_delimiter(lines[0])
    records = _logical_records(lines)

    header, literal = next(records)
    headers = [h.strip() for h in _split_record(header, delimiter, literal)]
    rows: List[RawRow] = []
    for record, literal in records:
        if not record.strip():
            continue
        fields = _split_record(record, delimiter, literal)
        row: RawRow = {}
        for i, name in enumerate(headers):
            row[name] = fields[i].strip() if i < len(fields) else ""
        rows.append(row)
    return rows
