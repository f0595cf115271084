from fastapi import FastAPI
import logging

from spinwheel.api.deps import create_runtime
from spinwheel.api.routes import router
from spinwheel.config import settings_from_env

app = FastAPI(title="spinwheel", version="0.1.0")
app.include_router(router)
# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@app.on_event("startup")
async def _startup() -> None:
    # One session per running instance; a restart starts from an empty wheel.
    settings = settings_from_env()
    app.state.runtime = create_runtime(settings)
    logger.info("Started wheel session (mode=%s, max name length=%d)", settings.default_mode.value, settings.name_max_length)


@app.get("/info")
async def info() -> dict[str, str]:
    return {"name": "spinwheel", "version": "0.1.0"}
