import pytest
from fastapi.testclient import TestClient

from emoticon_browser.config import Settings
from emoticon_browser.dependencies import get_catalog_repository
from emoticon_browser.main import app
from emoticon_browser.repositories import CatalogRepository
from emoticon_browser.schemas import Catalog, EmoticonRecord, Pack
from emoticon_browser.services import CatalogLoadError

client = TestClient(app)

SETTINGS = Settings(_env_file=None, SITE_BASE_URL="https://example.com/site/")

CATALOG = Catalog(
    packs=[Pack(id=1, title="기본"), Pack(id=2, title="Moods")],
    emoticons=[
        EmoticonRecord(
            pack_id=1,
            pack_title="기본",
            title="smile.png",
            description="Hello World",
            keywords=["happy", "joy"],
            img_src="https://example.com/site/images/%EA%B8%B0%EB%B3%B8/smile.png",
        ),
        EmoticonRecord(
            pack_id=2,
            pack_title="Moods",
            title="<b>cry</b>.png",
            description="Sad face",
            keywords=["tears"],
            img_src="https://example.com/site/images/Moods/%3Cb%3Ecry%3C/b%3E.png",
        ),
    ],
)


async def _failing_loader(settings):
    raise CatalogLoadError("Failed to load packs: 404 Not Found", source="packs", status_code=404)


def _use_repository(repository):
    app.dependency_overrides[get_catalog_repository] = lambda: repository
    return repository


@pytest.fixture(autouse=True)
def _clear_overrides():
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def loaded_repo():
    return _use_repository(CatalogRepository(settings=SETTINGS, catalog=CATALOG))

# Testes para a API de emoticons

def test_api_lists_all_records_in_camel_case(loaded_repo):
    response = client.get("/emoticons/api")
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 2
    assert data[0] == {
        "packId": 1,
        "packTitle": "기본",
        "title": "smile.png",
        "description": "Hello World",
        "keywords": ["happy", "joy"],
        "imgSrc": "https://example.com/site/images/%EA%B8%B0%EB%B3%B8/smile.png",
    }

def test_api_filters_by_pack_and_query(loaded_repo):
    assert [e["title"] for e in client.get("/emoticons/api", params={"pack": "2"}).json()] == ["<b>cry</b>.png"]
    assert [e["title"] for e in client.get("/emoticons/api", params={"q": "WORLD"}).json()] == ["smile.png"]
    assert client.get("/emoticons/api", params={"pack": "2", "q": "happy"}).json() == []

def test_api_lists_packs(loaded_repo):
    response = client.get("/emoticons/api/packs")
    assert response.status_code == 200
    assert response.json() == [{"id": 1, "title": "기본"}, {"id": 2, "title": "Moods"}]

def test_api_returns_503_when_datasets_fail():
    _use_repository(CatalogRepository(settings=SETTINGS, loader=_failing_loader))
    response = client.get("/emoticons/api")
    assert response.status_code == 503
    assert "Failed to load packs" in response.json()["detail"]

def test_first_request_loads_catalog():
    calls = []

    async def loader(settings):
        calls.append(settings)
        return CATALOG

    repository = _use_repository(CatalogRepository(settings=SETTINGS, loader=loader))
    assert client.get("/emoticons/api").status_code == 200
    assert client.get("/emoticons/api").status_code == 200
    assert calls == [SETTINGS]
    assert repository.loaded

# Testes para recarga

def test_reload_replaces_catalog():
    async def loader(settings):
        return Catalog(packs=[Pack(id=9, title="New")], emoticons=[])

    repository = _use_repository(CatalogRepository(settings=SETTINGS, loader=loader, catalog=CATALOG))
    response = client.post("/emoticons/api/reload")
    assert response.status_code == 200
    assert response.json()["packs"] == 1
    assert response.json()["emoticons"] == 0
    assert repository.catalog.packs == [Pack(id=9, title="New")]

def test_failed_reload_keeps_previous_catalog():
    repository = _use_repository(CatalogRepository(settings=SETTINGS, loader=_failing_loader, catalog=CATALOG))
    response = client.post("/emoticons/api/reload")
    assert response.status_code == 503
    assert repository.catalog is CATALOG
    assert len(client.get("/emoticons/api").json()) == 2

# Testes para a página HTML

def test_list_page_renders_grid(loaded_repo):
    response = client.get("/emoticons/")
    assert response.status_code == 200
    assert "smile.png" in response.text
    assert "#happy" in response.text
    assert "2개" in response.text
    # caminho decodificado para cópia
    assert "https://example.com/site/images/기본/smile.png" in response.text

def test_list_page_escapes_dataset_values(loaded_repo):
    response = client.get("/emoticons/", params={"pack": "2"})
    assert "&lt;b&gt;cry&lt;/b&gt;.png" in response.text
    assert "<b>cry</b>" not in response.text
    assert "1개" in response.text

def test_list_page_keeps_filter_state(loaded_repo):
    response = client.get("/emoticons/", params={"pack": "1", "q": "hello"})
    assert 'value="hello"' in response.text
    assert '<option value="1" selected>' in response.text

# Testes para health e raiz

def test_health_reports_catalog(loaded_repo):
    data = client.get("/health").json()
    assert data["status"] == "ok"
    assert data["catalog_loaded"] is True
    assert data["packs"] == 2
    assert data["emoticons"] == 2

def test_health_degraded_before_load():
    _use_repository(CatalogRepository(settings=SETTINGS, loader=_failing_loader))
    data = client.get("/health").json()
    assert data["status"] == "degraded"
    assert data["catalog_loaded"] is False

def test_root_redirects_to_grid():
    response = client.get("/", follow_redirects=False)
    assert response.status_code == 302
    assert response.headers["location"] == "/emoticons/"
