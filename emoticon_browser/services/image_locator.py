"""
Resolução de URLs de imagens dos emoticons.

As imagens ficam em ``images/<título do pack>/<arquivo>`` relativo à URL base
do site. Os componentes são normalizados para NFC antes de montar o caminho,
para que nomes compostos e decompostos (ex.: Hangul vindo do macOS) gerem a
mesma URL.

A verificação de existência é uma capacidade injetável (``ImageProbe``) com
dois resultados possíveis, ``verified`` ou ``unverified``; a URL devolvida é
a mesma nos dois casos.
"""
from __future__ import annotations

from typing import Any, List, Optional, Protocol, Sequence, Tuple
from urllib.parse import quote, urljoin
import logging
import unicodedata

import anyio
import httpx

from emoticon_browser.schemas import ImageLocation, ImageStatus

logger = logging.getLogger("uvicorn")

IMAGES_ROOT = "images"


def normalize_component(value: Any) -> str:
    """Coerce to text (None -> "") and normalise to NFC."""
    if value is None:
        return ""
    return unicodedata.normalize("NFC", str(value))


def build_image_path(pack_title: Any, file_name: Any) -> str:
    segments = [IMAGES_ROOT, normalize_component(pack_title), normalize_component(file_name)]
    return "/".join(quote(s, safe="") for s in segments)


def image_url(pack_title: Any, file_name: Any, base_url: str) -> str:
    return urljoin(base_url, build_image_path(pack_title, file_name))


class ImageProbe(Protocol):
    async def check(self, url: str) -> ImageStatus:
        ...


class DisabledImageProbe:
    """Probe used when checking is switched off: never touches the network."""

    async def check(self, url: str) -> ImageStatus:
        return ImageStatus.UNVERIFIED


class HttpImageProbe:
    """Existence check via a single HEAD request (no body is transferred)."""

    def __init__(self, client: httpx.AsyncClient, timeout: Optional[float] = None) -> None:
        self.client = client
        self.timeout = timeout

    async def check(self, url: str) -> ImageStatus:
        try:
            response = await self.client.head(
                url,
                headers={"Cache-Control": "no-store"},
                follow_redirects=True,
                timeout=self.timeout if self.timeout is not None else httpx.USE_CLIENT_DEFAULT,
            )
        except httpx.HTTPError as exc:
            logger.debug("[ImageProbe] HEAD falhou url=%s erro=%s", url, exc)
            return ImageStatus.UNVERIFIED
        if response.is_success:
            return ImageStatus.VERIFIED
        logger.debug("[ImageProbe] HEAD url=%s status=%s", url, response.status_code)
        return ImageStatus.UNVERIFIED


async def resolve_image(
    pack_title: Any,
    file_name: Any,
    base_url: str,
    probe: Optional[ImageProbe] = None,
) -> ImageLocation:
    """
    Monta a URL candidata e consulta o probe.

    Nunca lança exceção: qualquer falha do probe resulta em ``unverified``
    com a mesma URL candidata.
    """
    url = image_url(pack_title, file_name, base_url)
    if probe is None:
        return ImageLocation(url=url, status=ImageStatus.UNVERIFIED)
    try:
        status = await probe.check(url)
    except Exception:
        logger.debug("[ImageProbe] Probe com erro inesperado url=%s", url, exc_info=True)
        status = ImageStatus.UNVERIFIED
    return ImageLocation(url=url, status=status)


async def locate_images(
    targets: Sequence[Tuple[Any, Any]],
    base_url: str,
    probe: Optional[ImageProbe] = None,
    limiter: Optional[anyio.CapacityLimiter] = None,
) -> List[ImageLocation]:
    """
    Resolve (pack_title, file_name) pairs concurrently.

    Each task writes only its own slot, so results follow the input order
    whatever the completion order. *limiter* bounds concurrent probes.
    """
    results: List[Optional[ImageLocation]] = [None] * len(targets)

    async def _locate(index: int, pack_title: Any, file_name: Any) -> None:
        if limiter is None:
            results[index] = await resolve_image(pack_title, file_name, base_url, probe)
            return
        async with limiter:
            results[index] = await resolve_image(pack_title, file_name, base_url, probe)

    async with anyio.create_task_group() as tg:
        for index, (pack_title, file_name) in enumerate(targets):
            tg.start_soon(_locate, index, pack_title, file_name)

    locations = [loc for loc in results if loc is not None]
    verified = sum(1 for loc in locations if loc.verified)
    logger.info(
        "[ImageLocator] %s imagens resolvidas (verified=%s, unverified=%s)",
        len(locations),
        verified,
        len(locations) - verified,
    )
    return locations
