"""
Carregamento completo do catálogo de emoticons.

Busca os dois arquivos (packs e emoticons) em paralelo, faz o parse, junta
os registros e resolve as imagens. Qualquer falha ao buscar um dos arquivos
aborta o carregamento inteiro com ``CatalogLoadError``; nenhum catálogo
parcial é produzido.
"""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from urllib.parse import urljoin
import logging

import anyio
import httpx

from emoticon_browser.config import Settings, get_settings
from emoticon_browser.schemas import Catalog
from emoticon_browser.services.delimited_parser import parse_delimited
from emoticon_browser.services.image_locator import (
    DisabledImageProbe,
    HttpImageProbe,
    ImageProbe,
)
from emoticon_browser.services.record_joiner import build_packs, join_records

logger = logging.getLogger("uvicorn")


class CatalogLoadError(Exception):
    """Raised when one of the datasets cannot be fetched."""

    def __init__(
        self,
        message: str,
        *,
        source: Optional[str] = None,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.source = source
        self.url = url
        self.status_code = status_code


async def fetch_dataset(client: httpx.AsyncClient, source: str, url: str) -> str:
    """GET *url* and return its body decoded as UTF-8."""
    try:
        response = await client.get(url, headers={"Cache-Control": "no-store"})
    except httpx.HTTPError as exc:
        logger.error("[CatalogLoader] Erro ao buscar %s url=%s: %s", source, url, exc)
        raise CatalogLoadError(
            f"Failed to load {source}: {exc}", source=source, url=url
        ) from exc

    if not response.is_success:
        logger.error(
            "[CatalogLoader] Falha ao buscar %s url=%s status=%s",
            source,
            url,
            response.status_code,
        )
        raise CatalogLoadError(
            f"Failed to load {source}: {response.status_code} {response.reason_phrase}",
            source=source,
            url=url,
            status_code=response.status_code,
        )

    logger.info(
        "[CatalogLoader] %s carregado url=%s bytes=%s", source, url, len(response.content)
    )
    return response.content.decode("utf-8", errors="replace")


def default_probe(settings: Settings, client: httpx.AsyncClient) -> ImageProbe:
    if settings.probe_images:
        return HttpImageProbe(client, timeout=settings.probe_timeout)
    return DisabledImageProbe()


async def _load(
    settings: Settings,
    client: httpx.AsyncClient,
    probe: Optional[ImageProbe],
) -> Catalog:
    base_url = settings.site_base_url
    packs_url = urljoin(base_url, settings.packs_path)
    emoticons_url = urljoin(base_url, settings.emoticons_path)

    texts: List[str] = ["", ""]
    errors: List[Optional[CatalogLoadError]] = [None, None]

    async def _fetch(index: int, source: str, url: str) -> None:
        try:
            texts[index] = await fetch_dataset(client, source, url)
        except CatalogLoadError as exc:
            errors[index] = exc

    async with anyio.create_task_group() as tg:
        tg.start_soon(_fetch, 0, "packs", packs_url)
        tg.start_soon(_fetch, 1, "emoticons", emoticons_url)
    # source order, not completion order
    for error in errors:
        if error is not None:
            raise error
    packs_text, emoticons_text = texts

    packs = build_packs(parse_delimited(packs_text))
    rows = parse_delimited(emoticons_text)
    logger.debug("[CatalogLoader] Parse concluído packs=%s linhas=%s", len(packs), len(rows))

    emoticons = await join_records(
        packs,
        rows,
        base_url,
        probe if probe is not None else default_probe(settings, client),
        anyio.CapacityLimiter(settings.probe_concurrency),
    )
    logger.info("[CatalogLoader] Catálogo carregado packs=%s emoticons=%s", len(packs), len(emoticons))
    return Catalog(packs=packs, emoticons=emoticons, loaded_at=datetime.now())


async def load_catalog(
    settings: Optional[Settings] = None,
    client: Optional[httpx.AsyncClient] = None,
    probe: Optional[ImageProbe] = None,
) -> Catalog:
    """
    Carrega packs e emoticons e devolve o catálogo pronto para exibição.

    Args:
        settings: Configurações (padrão: ``get_settings()``)
        client: Cliente HTTP; quando omitido um cliente próprio é criado e fechado
        probe: Verificação de imagens; quando omitido segue ``PROBE_IMAGES``

    Raises:
        CatalogLoadError: Se algum dos arquivos não puder ser obtido
    """
    settings = settings or get_settings()
    if client is not None:
        return await _load(settings, client, probe)
    async with httpx.AsyncClient(timeout=settings.fetch_timeout) as own_client:
        return await _load(settings, own_client, probe)
