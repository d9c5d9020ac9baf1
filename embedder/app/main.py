from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from embedder.app.composition import create_app_dependencies
from embedder.app.core import SERVICE_NAME, VERSION
from embedder.app.routers.health import health_router
from embedder.app.routers.oembed import oembed_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.bind(service_name=SERVICE_NAME, event="api_starting").info("")
    dependencies = create_app_dependencies()
    await dependencies.connect()
    try:
        app.state.settings = dependencies.settings
        app.state.cache_manager = dependencies.cache_manager
        app.state.oembed_service = dependencies.service
        app.state.rewriter = dependencies.rewriter
        yield
    finally:
        logger.bind(service_name=SERVICE_NAME, event="api_stopping").info("")
        await dependencies.close()


app = FastAPI(
    title="Link Embedder",
    version=VERSION,
    lifespan=lifespan,
)

app.include_router(health_router)
app.include_router(oembed_router)


def main() -> None:
    import uvicorn

    uvicorn.run("embedder.app.main:app", host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
