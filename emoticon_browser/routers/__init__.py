from .emoticons import router as emoticons_router

__all__ = ["emoticons_router"]
