"""Pack/text filter over the joined emoticon records."""

from __future__ import annotations

from typing import Iterable, List, Optional

from emoticon_browser.schemas import EmoticonRecord

ALL_PACKS = "all"


def matches_pack(record: EmoticonRecord, pack_selector: str) -> bool:
    if pack_selector == ALL_PACKS:
        return True
    return record.pack_id is not None and str(record.pack_id) == pack_selector


def matches_query(record: EmoticonRecord, needle: str) -> bool:
    """*needle* must already be trimmed and lower-cased."""
    if not needle:
        return True
    return (
        needle in record.title.lower()
        or needle in record.description.lower()
        or needle in record.pack_title.lower()
        or any(needle in k.lower() for k in record.keywords)
    )


def filter_emoticons(
    records: Iterable[EmoticonRecord],
    pack_selector: Optional[str] = ALL_PACKS,
    query: Optional[str] = "",
) -> List[EmoticonRecord]:
    """
    Filtra os registros por pack e por texto livre.

    O texto é comparado como substring, sem diferenciar maiúsculas, contra
    título, descrição, título do pack e palavras-chave. A ordem de entrada
    é preservada.
    """
    selector = ALL_PACKS if pack_selector is None else pack_selector
    needle = (query or "").strip().lower()
    return [
        r for r in records
        if matches_pack(r, selector) and matches_query(r, needle)
    ]
