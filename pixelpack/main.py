import logging
import random
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from importlib.metadata import version as pkg_version

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pixelpack.api import game_router, health_router
from pixelpack.config import settings
from pixelpack.db.database import async_session_factory, init_db
from pixelpack.db.store import DatabaseStore
from pixelpack.services.card_factory import CardFactory
from pixelpack.services.economy import EconomyController
from pixelpack.services.persistence import PersistenceSynchronizer

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Load the saved game on startup; flush pending writes on shutdown."""
    await init_db()

    store = DatabaseStore(async_session_factory)
    synchronizer = PersistenceSynchronizer(
        store,
        config_debounce=settings.config_debounce_seconds,
        progress_debounce=settings.progress_debounce_seconds,
        starting_gold=settings.starting_gold,
    )
    state = await synchronizer.load()

    app.state.store = store
    app.state.economy = EconomyController(
        state,
        CardFactory(random.Random(settings.random_seed)),
        synchronizer,
        starting_gold=settings.starting_gold,
        battle_deck_limit=settings.battle_deck_limit,
    )

    yield

    await synchronizer.aclose()
    logger.info("Pending writes flushed")


app = FastAPI(
    title=settings.app_name,
    version=pkg_version("pixelpack"),
    lifespan=lifespan,
)

app.include_router(game_router)
app.include_router(health_router)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
