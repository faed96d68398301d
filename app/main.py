import logging
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import FileResponse, Response
from fastapi.staticfiles import StaticFiles

from app.core import config

LOG_LEVEL = getattr(logging, config.LOG_LEVEL_STR.upper(), None)
if not isinstance(LOG_LEVEL, int):
    raise ValueError(f"Invalid LOG_LEVEL: {config.LOG_LEVEL_STR}")

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    datefmt="%H:%M:%S",
)

from app.api.thumbnails import router as thumbnails_router

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Origin, X-Requested-With, Content-Type, Accept, Authorization",
}

app = FastAPI(
    title="Video Thumbnail API",
    description="Extract a single JPEG frame from a remote video and return it base64-encoded",
    version="1.0.0",
)


@app.middleware("http")
async def cors_middleware(request: Request, call_next):
    # Any OPTIONS request is answered here, before routing.
    if request.method == "OPTIONS":
        response = Response(status_code=200)
    else:
        response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


app.include_router(thumbnails_router)


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.get("/", include_in_schema=False)
def index():
    return FileResponse(STATIC_DIR / "index.html")


app.mount("/", StaticFiles(directory=STATIC_DIR), name="static")


def run():
    logger.info(f"Server running at http://localhost:{config.PORT}")
    uvicorn.run(app, host=config.HOST, port=config.PORT, log_level=logging.getLevelName(LOG_LEVEL).lower())


if __name__ == "__main__":
    run()
