from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from redis.asyncio import Redis

from promptmarket.config import settings
from promptmarket.api.auth import router as auth_router
from promptmarket.api.cart import router as cart_router
from promptmarket.api.catalog import router as catalog_router
from promptmarket.api.error_handlers import register_error_handlers
from promptmarket.api.favorites import router as favorites_router
from promptmarket.api.purchases import router as purchases_router
from promptmarket.middleware.rate_limit import RateLimitMiddleware
from promptmarket.middleware.security import SecurityHeadersMiddleware
from promptmarket.store.providers import build_store_provider

# Configure structlog
structlog.configure(
    processors=[
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
        (
            structlog.dev.ConsoleRenderer()
            if settings.APP_ENV == "development"
            else structlog.processors.JSONRenderer()
        ),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(0),
    context_class=dict,
    logger_factory=structlog.PrintLoggerFactory(),
    cache_logger_on_first_use=True,
)

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    log.info("starting_up", env=settings.APP_ENV, store_backend=settings.STORE_BACKEND)
    redis = Redis.from_url(settings.REDIS_URL, decode_responses=True)
    try:
        await redis.ping()
        log.info("redis_connected", url=settings.REDIS_URL)
    except Exception as e:
        log.warning("redis_connection_failed", error=str(e))
    app.state.redis = redis

    app.state.store_provider = await build_store_provider(
        settings.STORE_BACKEND,
        seed=settings.SEED_MEMORY_STORE,
    )

    yield

    # Shutdown
    log.info("shutting_down")
    await redis.close()


app = FastAPI(
    title="PromptMarket",
    lifespan=lifespan,
)

# CORS middleware for development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "development" else [],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Security headers (outermost: runs last on request, first on response)
app.add_middleware(SecurityHeadersMiddleware)

# Rate limiting (runs after security headers are already queued)
app.add_middleware(RateLimitMiddleware)

register_error_handlers(app)

app.include_router(auth_router)
app.include_router(catalog_router)
app.include_router(favorites_router)
app.include_router(cart_router)
app.include_router(purchases_router)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
