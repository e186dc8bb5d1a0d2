import anyio
import pytest

from emoticon_browser.config import Settings
from emoticon_browser.repositories import CatalogRepository
from emoticon_browser.schemas import Catalog, EmoticonRecord, Pack
from emoticon_browser.services import CatalogLoadError
from emoticon_browser.utils.template_helpers import display_path, hashtags

SETTINGS = Settings(_env_file=None)


def _catalog(*titles):
    return Catalog(
        packs=[Pack(id=1, title="Basic")],
        emoticons=[
            EmoticonRecord(pack_id=1, pack_title="Basic", title=t, img_src=f"https://example.com/{t}")
            for t in titles
        ],
    )

# Testes para o repositório em memória

@pytest.mark.asyncio
async def test_search_delegates_to_filter():
    repo = CatalogRepository(settings=SETTINGS, catalog=_catalog("smile.png", "cry.png"))
    assert [e.title for e in await repo.search("1", "CRY")] == ["cry.png"]
    assert [e.title for e in await repo.search()] == ["smile.png", "cry.png"]
    assert [p.title for p in await repo.packs()] == ["Basic"]

@pytest.mark.asyncio
async def test_get_loads_once():
    calls = []

    async def loader(settings):
        calls.append(1)
        return _catalog("a.png")

    repo = CatalogRepository(settings=SETTINGS, loader=loader)
    assert not repo.loaded
    first = await repo.get()
    second = await repo.get()
    assert first is second
    assert len(calls) == 1

@pytest.mark.asyncio
async def test_concurrent_first_gets_share_one_load():
    calls = []

    async def loader(settings):
        calls.append(1)
        await anyio.sleep(0.01)
        return _catalog("a.png")

    repo = CatalogRepository(settings=SETTINGS, loader=loader)
    results = []

    async def _get():
        results.append(await repo.get())

    async with anyio.create_task_group() as tg:
        for _ in range(5):
            tg.start_soon(_get)

    assert len(calls) == 1
    assert len(results) == 5
    assert all(r is results[0] for r in results)

@pytest.mark.asyncio
async def test_reload_failure_propagates_and_keeps_catalog():
    async def loader(settings):
        raise CatalogLoadError("Failed to load emoticons: 500 Internal Server Error")

    old = _catalog("a.png")
    repo = CatalogRepository(settings=SETTINGS, loader=loader, catalog=old)
    with pytest.raises(CatalogLoadError):
        await repo.reload()
    assert repo.catalog is old

# Testes para os helpers de template

def test_display_path_decodes_percent_encoding():
    assert display_path("https://x.com/images/%EA%B8%B0%EB%B3%B8/a%20b.png") == "https://x.com/images/기본/a b.png"

def test_display_path_falls_back_on_invalid_encoding():
    assert display_path("https://x.com/%FF.png") == "https://x.com/%FF.png"
    assert display_path("") == ""

def test_hashtags():
    assert hashtags(["a", "", "b"]) == ["#a", "#b"]
