import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from uniyelp.core.config import get_settings
from uniyelp.core.database import engine, Base
from uniyelp.core.errors import Conflict, InvalidDiscriminator, NotFound, StoreFailure
from uniyelp.core.logging import configure_logging
from uniyelp.api import agent, api_keys, catalog, ratings, users

# Import models so their tables are registered on Base.metadata
import uniyelp.models  # noqa: F401

settings = get_settings()
configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger("uniyelp")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("[Startup] creating database tables")
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

# Set all CORS enabled origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(InvalidDiscriminator)
async def invalid_discriminator_handler(request: Request, exc: InvalidDiscriminator):
    return JSONResponse(status_code=400, content={"success": False, "error": str(exc)})


@app.exception_handler(NotFound)
async def not_found_handler(request: Request, exc: NotFound):
    return JSONResponse(status_code=404, content={"success": False, "error": str(exc)})


@app.exception_handler(Conflict)
async def conflict_handler(request: Request, exc: Conflict):
    return JSONResponse(status_code=409, content={"success": False, "error": str(exc)})


@app.exception_handler(StoreFailure)
async def store_failure_handler(request: Request, exc: StoreFailure):
    logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"success": False, "error": "Internal storage error"})


# Register routers
app.include_router(catalog.router, prefix=settings.API_V1_STR)
app.include_router(ratings.router, prefix=f"{settings.API_V1_STR}/ratings")
app.include_router(users.router, prefix=settings.API_V1_STR)
app.include_router(api_keys.router, prefix=f"{settings.API_V1_STR}/api-keys")
app.include_router(agent.router, prefix=f"{settings.API_V1_STR}/agent")


@app.get("/")
async def root():
    return {
        "message": "Welcome to UniYelp Catalog API",
        "docs": "/docs",
        "status": "running"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
