"""
Application entry point for the ABMind Course Portal backend.

Design choices:
- Mounts versioned routers using a configurable prefix from core.config Settings.
- Serves sitemap.xml and robots.txt at the site root, next to a basic health check.
"""
import logging

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, Response

from api.v1.routes import router as v1_router
from core.config import get_settings
from core.errors import ContentError
from core.logging_config import configure_logging
from services.content_store import ContentStore, get_content_store
from services.seo import build_robots, build_sitemap, render_robots_txt, render_sitemap_xml

_settings = get_settings()

# Configure structured logging
configure_logging(_settings.log_level)

app = FastAPI(title="ABMind Course Portal - Backend", version="0.1.0")

# Basic CORS (can be restricted via settings in the future)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    return {"message": "Server running"}


@app.get("/sitemap.xml")
async def sitemap(store: ContentStore = Depends(get_content_store)) -> Response:
    try:
        courses = store.load_courses()
    except ContentError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e
    xml = render_sitemap_xml(build_sitemap(courses))
    return Response(content=xml, media_type="application/xml")


@app.get("/robots.txt", response_class=PlainTextResponse)
async def robots() -> str:
    return render_robots_txt(build_robots())


# Mount versioned API routers
app.include_router(v1_router, prefix=_settings.api_v1_prefix)


@app.on_event("startup")
async def startup_event():
    """Load content once at startup so configuration errors show up in the logs immediately."""
    logger = logging.getLogger("startup")
    logger.info("Starting application initialization...")
    try:
        snapshot = get_content_store().snapshot()
    except ContentError as e:
        # the API answers 500 for content routes until the files are fixed
        logger.error(f"Content failed to load: {e}")
        return
    logger.info("Application initialization completed", extra={"count": len(snapshot.courses)})
