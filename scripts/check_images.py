#!/usr/bin/env python3
"""
Script para verificar quais imagens do catálogo não existem no site.

Carrega os dois arquivos de dados a partir de SITE_BASE_URL (ou do argumento),
faz um HEAD em cada imagem e lista as que não responderam com sucesso.

Uso:
  python scripts/check_images.py [SITE_BASE_URL]
"""
import asyncio
import sys
from urllib.parse import unquote, urljoin

import anyio
import httpx

from emoticon_browser.config import get_settings
from emoticon_browser.services.catalog_loader import CatalogLoadError, fetch_dataset
from emoticon_browser.services.delimited_parser import parse_delimited
from emoticon_browser.services.image_locator import HttpImageProbe, locate_images
from emoticon_browser.services.record_joiner import build_pack_map, build_packs, plan_emoticon


async def check_images(base_url: str) -> int:
    """Retorna o número de imagens não encontradas."""
    settings = get_settings()
    async with httpx.AsyncClient(timeout=settings.fetch_timeout) as client:
        packs_text = await fetch_dataset(client, "packs", urljoin(base_url, settings.packs_path))
        emoticons_text = await fetch_dataset(client, "emoticons", urljoin(base_url, settings.emoticons_path))

        packs = build_packs(parse_delimited(packs_text))
        pack_map = build_pack_map(packs)
        drafts = [plan_emoticon(row, pack_map) for row in parse_delimited(emoticons_text)]
        print(f"📦 Packs: {len(packs)}")
        print(f"🖼️ Emoticons: {len(drafts)}")

        locations = await locate_images(
            [(d.pack_title, d.title) for d in drafts],
            base_url,
            HttpImageProbe(client, timeout=settings.probe_timeout),
            anyio.CapacityLimiter(settings.probe_concurrency),
        )

    missing = [loc for loc in locations if not loc.verified]
    for loc in missing:
        print(f"   ❌ {unquote(loc.url)}")
    return len(missing)


if __name__ == "__main__":
    base = sys.argv[1] if len(sys.argv) > 1 else get_settings().site_base_url
    if not base.endswith("/"):
        base += "/"
    print("🔧 VERIFICAÇÃO DE IMAGENS")
    print("=" * 50)
    print(f"🌐 Site: {base}")
    try:
        missing_count = asyncio.run(check_images(base))
    except CatalogLoadError as e:
        print(f"❌ ERRO: {e}")
        sys.exit(2)
    print()
    if missing_count:
        print(f"💥 {missing_count} IMAGENS NÃO ENCONTRADAS")
        sys.exit(1)
    print("🎉 TODAS AS IMAGENS ENCONTRADAS!")
    sys.exit(0)
