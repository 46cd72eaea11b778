from pixelpack.api.game import router as game_router
from pixelpack.api.health import router as health_router

__all__ = [
    "game_router",
    "health_router",
]
