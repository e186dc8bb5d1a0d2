from pathlib import Path
from fastapi import FastAPI, Request, Depends, status
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles
import logging
from datetime import datetime

from .config import get_settings
from .dependencies import get_catalog_repository
from .repositories import CatalogRepository
from .routers import emoticons_router
from .services import CatalogLoadError
from .version import read_version


SETTINGS = get_settings()
APP_VERSION = read_version()

logger = logging.getLogger("uvicorn")

# Inicializar a aplicação FastAPI
app = FastAPI(
    title="Emoticon Browser",
    description="Catálogo de emoticons com busca por pack e texto",
    version=APP_VERSION
)

static_dir = Path(__file__).resolve().parent / "static"
app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

# Em desenvolvimento, evitar cache para respostas HTML para refletir mudanças imediatamente
@app.middleware("http")
async def _no_cache_html_in_dev(request: Request, call_next):
    response = await call_next(request)
    if SETTINGS.environment == "development":
        content_type = response.headers.get("content-type", "")
        if "text/html" in content_type:
            response.headers["Cache-Control"] = "no-store, max-age=0"
            response.headers["Pragma"] = "no-cache"
            response.headers["Expires"] = "0"
    return response

# Incluir routers
app.include_router(emoticons_router)

@app.on_event("startup")
async def _load_catalog_on_startup() -> None:
    logger.info("🚀 Emoticon Browser starting - version=%s environment=%s", APP_VERSION, SETTINGS.environment)
    logger.info("🌐 Site base URL: %s", SETTINGS.site_base_url)
    logger.info("🖼️ Image probe: %s (concurrency=%s)", SETTINGS.probe_images, SETTINGS.probe_concurrency)
    if not SETTINGS.load_on_startup:
        return
    # Falha aqui não derruba o processo; a primeira requisição tenta de novo
    try:
        await get_catalog_repository().reload()
    except CatalogLoadError as e:
        logger.error(f"Catalog initialization error: {str(e)}")


@app.get("/health")
async def health(
    repository: CatalogRepository = Depends(get_catalog_repository),
) -> dict:
    """Basic health check endpoint with catalog summary."""
    catalog = repository.catalog
    return {
        "status": "ok" if catalog is not None else "degraded",
        "version": APP_VERSION,
        "catalog_loaded": catalog is not None,
        "packs": len(catalog.packs) if catalog else 0,
        "emoticons": len(catalog.emoticons) if catalog else 0,
        "time": datetime.now().isoformat(),
    }


@app.get("/", include_in_schema=False)
async def index() -> RedirectResponse:
    """Página inicial: a grade de emoticons."""
    return RedirectResponse(url="/emoticons/", status_code=status.HTTP_302_FOUND)
