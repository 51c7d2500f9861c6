# RecipeBox API Main Entry Point
import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from .errors import AppError
from .infra.redis_client import close_redis
from .routers.admin import router as admin_router
from .routers.cookbooks import router as cookbooks_router
from .routers.metadata import router as metadata_router
from .routers.ready import router as ready_router
from .routers.recipes import router as recipes_router
from .routers.users import router as users_router
from .settings import settings

# Configure structured logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger("recipebox")

# Rate limiter (per-IP)
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit_default],
    enabled=settings.rate_limit_enabled,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_redis()


app = FastAPI(title="RecipeBox API", version="0.1.0", lifespan=lifespan)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code} {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(ready_router, prefix="/api", tags=["ready"])
app.include_router(users_router, prefix="/api", tags=["users"])
app.include_router(recipes_router, prefix="/api", tags=["recipes"])
app.include_router(cookbooks_router, prefix="/api", tags=["cookbooks"])
app.include_router(metadata_router, prefix="/api", tags=["metadata"])
app.include_router(admin_router, prefix="/api", tags=["admin"])
