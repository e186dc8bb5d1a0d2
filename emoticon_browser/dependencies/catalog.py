from typing import Optional
import logging

from fastapi import Depends, HTTPException, status

from emoticon_browser.repositories import CatalogRepository
from emoticon_browser.schemas import Catalog
from emoticon_browser.services.catalog_loader import CatalogLoadError

logger = logging.getLogger("uvicorn")

_repository: Optional[CatalogRepository] = None


def get_catalog_repository() -> CatalogRepository:
    """Repositório compartilhado pelo processo (um catálogo por instância)."""
    global _repository
    if _repository is None:
        _repository = CatalogRepository()
    return _repository


async def get_catalog(
    repository: CatalogRepository = Depends(get_catalog_repository),
) -> Catalog:
    """
    Retorna o catálogo carregado.

    Raises:
        HTTPException: 503 se os arquivos de dados não puderem ser obtidos
    """
    try:
        return await repository.get()
    except CatalogLoadError as exc:
        logger.error("[get_catalog] %s", exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(exc),
        ) from exc
