"""Join emoticon rows with their pack rows into flat display records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence
import logging
import re

import anyio

from emoticon_browser.schemas import EmoticonRecord, Pack
from emoticon_browser.services.delimited_parser import RawRow
from emoticon_browser.services.image_locator import ImageProbe, locate_images

logger = logging.getLogger("uvicorn")

UNKNOWN_PACK_PREFIX = "UNKNOWN_"
NOT_A_NUMBER = "NaN"
INTEGER = re.compile(r"[+-]?[0-9]+(?:\.0*)?", re.ASCII)


def to_int(value: Optional[str]) -> Optional[int]:
    """Integer value of *value* (ASCII digits, optional sign, integral decimals like "1.0"), else None."""
    text = (value or "").strip()
    if not INTEGER.fullmatch(text):
        return None
    return int(text.split(".", 1)[0])


def split_keywords(value: Optional[str]) -> List[str]:
    return [k.strip() for k in (value or "").split(",") if k.strip()]


def build_packs(rows: Iterable[RawRow]) -> List[Pack]:
    """Packs whose id parses as an integer; the others can never be referenced."""
    packs: List[Pack] = []
    for row in rows:
        pack_id = to_int(row.get("id"))
        if pack_id is None:
            logger.warning("[RecordJoiner] Pack ignorado, id inválido: %r", row.get("id"))
            continue
        packs.append(Pack(id=pack_id, title=row.get("title") or ""))
    return packs


def build_pack_map(packs: Iterable[Pack]) -> Dict[int, Pack]:
    return {p.id: p for p in packs}


def unknown_pack_title(pack_id: Optional[int]) -> str:
    token = str(pack_id) if pack_id is not None else NOT_A_NUMBER
    return f"{UNKNOWN_PACK_PREFIX}{token}"


@dataclass(frozen=True)
class EmoticonDraft:
    """Joined row still waiting for its image URL."""
    pack_id: Optional[int]
    pack_title: str
    title: str
    description: str
    keywords: List[str]
    pack_resolved: bool = True


def plan_emoticon(row: RawRow, pack_map: Dict[int, Pack]) -> EmoticonDraft:
    pack_id = to_int(row.get("emoticon_pack_id"))
    pack = pack_map.get(pack_id) if pack_id is not None else None
    return EmoticonDraft(
        pack_id=pack_id,
        pack_title=pack.title if pack else unknown_pack_title(pack_id),
        title=row.get("title") or "",
        description=row.get("description") or "",
        keywords=split_keywords(row.get("keyword")),
        pack_resolved=pack is not None,
    )


def to_record(draft: EmoticonDraft, img_src: str) -> EmoticonRecord:
    return EmoticonRecord(
        pack_id=draft.pack_id,
        pack_title=draft.pack_title,
        title=draft.title,
        description=draft.description,
        keywords=draft.keywords,
        img_src=img_src,
    )


async def join_records(
    packs: Iterable[Pack],
    rows: Sequence[RawRow],
    base_url: str,
    probe: Optional[ImageProbe] = None,
    limiter: Optional[anyio.CapacityLimiter] = None,
) -> List[EmoticonRecord]:
    """
    Junta as linhas de emoticons aos packs e resolve a imagem de cada uma.

    Args:
        packs: Packs já carregados
        rows: Linhas brutas do arquivo de emoticons
        base_url: URL base do site (onde fica ``images/``)
        probe: Verificação de existência opcional
        limiter: Limite de verificações simultâneas

    Returns:
        Registros na mesma ordem das linhas de entrada
    """
    pack_map = build_pack_map(packs)
    drafts = [plan_emoticon(row, pack_map) for row in rows]

    unresolved = sorted({d.pack_title for d in drafts if not d.pack_resolved})
    if unresolved:
        logger.warning("[RecordJoiner] Packs não encontrados: %s", ", ".join(unresolved))

    locations = await locate_images(
        [(d.pack_title, d.title) for d in drafts], base_url, probe, limiter
    )
    return [to_record(d, loc.url) for d, loc in zip(drafts, locations)]
