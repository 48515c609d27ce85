import logging

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from sheep_backend import settings
from sheep_backend.api.routes import router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)

app = FastAPI(title="Sheep Counter API")

app.include_router(router)

# check_dir=False: OUTPUT_DIR is created by the first finished job
app.mount("/static", StaticFiles(directory=settings.OUTPUT_DIR, check_dir=False), name="static")

# To run locally:
# uvicorn sheep_backend.main:app --reload --port 8000
