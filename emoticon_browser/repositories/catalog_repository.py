from typing import Awaitable, Callable, List, Optional
import logging

import anyio

from emoticon_browser.config import Settings, get_settings
from emoticon_browser.schemas import Catalog, EmoticonRecord, Pack
from emoticon_browser.services.catalog_loader import load_catalog
from emoticon_browser.services.filter_engine import ALL_PACKS, filter_emoticons

logger = logging.getLogger("uvicorn")

CatalogLoader = Callable[[Settings], Awaitable[Catalog]]


class CatalogRepository:
    """
    Repositório em memória do catálogo carregado.

    O catálogo é imutável; ``reload`` monta um novo e só substitui a
    referência atual depois que o carregamento termina com sucesso.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        loader: Optional[CatalogLoader] = None,
        catalog: Optional[Catalog] = None,
    ):
        self.settings = settings or get_settings()
        self._loader: CatalogLoader = loader or load_catalog
        self._catalog = catalog
        self._lock = anyio.Lock()

    @property
    def loaded(self) -> bool:
        return self._catalog is not None

    @property
    def catalog(self) -> Optional[Catalog]:
        return self._catalog

    async def reload(self) -> Catalog:
        """Recarrega os dois arquivos; em caso de erro mantém o catálogo anterior."""
        async with self._lock:
            return await self._load()

    async def _load(self) -> Catalog:
        catalog = await self._loader(self.settings)
        self._catalog = catalog
        logger.info(
            "[CatalogRepository] Catálogo atualizado packs=%s emoticons=%s",
            len(catalog.packs),
            len(catalog.emoticons),
        )
        return catalog

    async def get(self) -> Catalog:
        """Retorna o catálogo atual, carregando-o na primeira chamada."""
        if self._catalog is None:
            async with self._lock:
                # outra tarefa pode ter carregado enquanto esperávamos o lock
                if self._catalog is None:
                    return await self._load()
        return self._catalog

    async def packs(self) -> List[Pack]:
        return (await self.get()).packs

    async def search(
        self,
        pack: Optional[str] = ALL_PACKS,
        q: Optional[str] = None,
    ) -> List[EmoticonRecord]:
        catalog = await self.get()
        return filter_emoticons(catalog.emoticons, pack, q)
