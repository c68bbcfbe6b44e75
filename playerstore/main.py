from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from .config import Settings, settings
from .plugin import ProfilePlugin
from .routers import commands, events, players


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Build the API around a freshly constructed ProfilePlugin."""
    plugin = ProfilePlugin(app_settings or settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await plugin.start()
        yield
        await plugin.stop()

    api_app = FastAPI(title="Player Store API")
    api_app.state.plugin = plugin
    api_app.include_router(commands.router)
    api_app.include_router(events.router)
    api_app.include_router(players.router)

    app = FastAPI(lifespan=lifespan, title="Player Store")
    app.state.plugin = plugin
    app.mount("/api", api_app)
    return app
