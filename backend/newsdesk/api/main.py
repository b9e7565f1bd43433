from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from newsdesk.core.config import settings
from newsdesk.api.routes import auth, chat
import logging

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Backend API for the news chat assistant",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Errors go out as ``{"message": ...}``, the shape the web client reads."""
    return JSONResponse(
        {"message": exc.detail}, status_code=exc.status_code, headers=getattr(exc, "headers", None)
    )


app.include_router(auth.router, prefix="/api", tags=["Auth"])
app.include_router(chat.router, prefix="/api", tags=["Chat"])

# User photos, generated reports and uploaded PDFs
_upload_dir = Path(settings.UPLOAD_DIR)
(_upload_dir / "pdfs").mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=str(_upload_dir)), name="uploads")


@app.on_event("startup")
async def startup():
    from newsdesk.core.database import init_db

    await init_db()
    logger.info("Database initialized on startup")


@app.on_event("shutdown")
async def shutdown():
    from newsdesk.core.database import close_db

    await close_db()


@app.get("/health")
async def health_check():
    return {"status": "ok", "version": settings.VERSION}


@app.get("/")
async def root():
    return {"message": "Welcome to Newsdesk Chat API"}
