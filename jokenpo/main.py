import logging

from fastapi import FastAPI

from jokenpo import __version__
from jokenpo.api.routes import router

# Configure logging
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="jokenpo", version=__version__)
app.include_router(router)


@app.get("/info")
async def info() -> dict[str, str]:
    return {"name": "jokenpo", "version": __version__}
