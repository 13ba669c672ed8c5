from social_preview.api.routes.extract import router as extract_router

__all__ = [
    "extract_router",
]
