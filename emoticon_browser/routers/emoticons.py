from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from typing import Any, Dict, List, Optional
from pathlib import Path
import logging

from emoticon_browser.version import read_version
from emoticon_browser.utils.template_helpers import display_path, hashtags

from emoticon_browser.dependencies import get_catalog, get_catalog_repository
from emoticon_browser.repositories import CatalogRepository
from emoticon_browser.schemas import Catalog, EmoticonRecord, Pack
from emoticon_browser.services.catalog_loader import CatalogLoadError
from emoticon_browser.services.filter_engine import ALL_PACKS, filter_emoticons

logger = logging.getLogger("uvicorn")

# Configurar o router
router = APIRouter(
    prefix="/emoticons",
    tags=["emoticons"],
    responses={404: {"description": "Not found"}},
)

# Templates
templates = Jinja2Templates(directory=str(Path(__file__).resolve().parents[1] / "templates"))
templates.env.globals["app_version"] = read_version()
templates.env.globals["all_packs"] = ALL_PACKS
templates.env.filters["display_path"] = display_path
templates.env.filters["hashtags"] = hashtags

# Rotas para interface web

@router.get("/", response_class=HTMLResponse)
async def list_emoticons(
    request: Request,
    pack: str = ALL_PACKS,
    q: Optional[str] = None,
    catalog: Catalog = Depends(get_catalog),
):
    """
    Grade de emoticons filtrada por pack e texto.

    O estado do filtro vive na query string; cada mudança gera uma nova
    requisição e a lista é recalculada do zero.
    """
    emoticons = filter_emoticons(catalog.emoticons, pack, q)
    return templates.TemplateResponse(
        request,
        "emoticons/list.html",
        {
            "packs": catalog.packs,
            "emoticons": emoticons,
            "count": len(emoticons),
            "pack_filter": pack,
            "q": q or "",
        },
    )

# Rotas de API

@router.get("/api", response_model=List[EmoticonRecord])
async def api_list_emoticons(
    pack: str = ALL_PACKS,
    q: Optional[str] = None,
    catalog: Catalog = Depends(get_catalog),
):
    """
    API para listar emoticons filtrados (``pack`` = id ou ``all``).
    """
    return filter_emoticons(catalog.emoticons, pack, q)

@router.get("/api/packs", response_model=List[Pack])
async def api_list_packs(catalog: Catalog = Depends(get_catalog)):
    """
    API para listar os packs.
    """
    return catalog.packs

@router.post("/api/reload", response_model=Dict[str, Any])
async def api_reload_catalog(
    repository: CatalogRepository = Depends(get_catalog_repository),
):
    """
    Recarrega os arquivos de dados. Em caso de falha o catálogo anterior é mantido.
    """
    try:
        catalog = await repository.reload()
    except CatalogLoadError as exc:
        logger.exception("[reload] Falha ao recarregar catálogo")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc
    return {
        "packs": len(catalog.packs),
        "emoticons": len(catalog.emoticons),
        "loaded_at": catalog.loaded_at.isoformat() if catalog.loaded_at else None,
    }
