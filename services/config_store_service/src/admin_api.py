import asyncio
from contextlib import asynccontextmanager
from typing import Callable
from fastapi import FastAPI, HTTPException, Request

from shared.common_utils.logger import logger
from ..config.env_settings import settings
from .config_store import ConfigurationStore
from .monitoring_config import MonitoringConfiguration
from .schemas import ConfigKeysResponse, ConfigValueResponse, ReloadResponse, SnapshotMetadata


def create_app(store_factory: Callable[[], ConfigurationStore] = MonitoringConfiguration) -> FastAPI:
    """Builds the admin API. The store is created on startup and closed on shutdown."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        app.state.store = store_factory()
        logger.info(f"{settings.SERVICE_NAME} v{settings.SERVICE_VERSION} started")
        yield
        # Shutdown
        app.state.store.close()
        logger.info(f"{settings.SERVICE_NAME} stopped")

    app = FastAPI(title="Config Store Service", lifespan=lifespan)

    @app.get("/api/v1/config/metadata")
    async def get_metadata(request: Request) -> SnapshotMetadata:
        return request.app.state.store.metadata

    @app.get("/api/v1/config/keys")
    async def get_keys(request: Request) -> ConfigKeysResponse:
        snapshot, metadata = request.app.state.store.current()
        return ConfigKeysResponse(keys=sorted(snapshot), generation=metadata.generation)

    @app.get("/api/v1/config/value/{key:path}")
    async def get_value(key: str, request: Request) -> ConfigValueResponse:
        # Raw lookup, so arbitrary client keys never enter the typed cache
        snapshot, metadata = request.app.state.store.current()
        value = snapshot.get(key)
        if value is None:
            raise HTTPException(status_code=404, detail=f"Configuration key {key} not found")
        return ConfigValueResponse(key=key, value=value, generation=metadata.generation)

    @app.post("/api/v1/config/reload")
    async def reload_config(request: Request) -> ReloadResponse:
        store: ConfigurationStore = request.app.state.store
        metadata = await asyncio.to_thread(store.reload)
        if metadata.failed:
            logger.error(f"Reload from {metadata.location} failed, serving an empty snapshot")
            message = "Configuration source could not be read, defaults are in effect"
        else:
            message = "Configuration reloaded successfully"
        return ReloadResponse(success=not metadata.failed, message=message, metadata=metadata)

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)
