import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings
from core.errors import register_exception_handlers
from models import now_iso
from services import alias_store, config_store
from services.ai_features import AIFeatures
from services.json_store import JsonDocument
from api.system import router as system_router
from api.packages import router as packages_router
from api.aliases import router as aliases_router
from api.ai_config import router as ai_config_router
from api.ai import router as ai_router

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)
logger = logging.getLogger("lph.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    data_dir = settings.data_dir()
    logger.info("Linux Package Hub starting... DEBUG=%s, data dir %s", settings.DEBUG, data_dir)

    aliases_doc = JsonDocument(
        data_dir / "aliases.json",
        alias_store.default_document,
        cache=settings.STORE_CACHE,
    )
    configs_doc = JsonDocument(
        data_dir / "ai_configs.json",
        config_store.default_document,
        cache=settings.STORE_CACHE,
    )

    app.state.alias_store = alias_store.AliasStore(aliases_doc)
    app.state.config_store = config_store.AIConfigStore(configs_doc)
    app.state.ai_features = AIFeatures(app.state.config_store)

    yield

    logger.info("Linux Package Hub shutting down...")


app = FastAPI(
    title="Linux Package Hub API",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.CORS_ORIGIN],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(system_router)
app.include_router(packages_router)
app.include_router(aliases_router)
app.include_router(ai_config_router)
app.include_router(ai_router)


@app.get("/health")
async def health():
    return {"status": "ok", "timestamp": now_iso()}


if __name__ == "__main__":
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
