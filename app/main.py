import logging
from typing import Optional

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from redis.asyncio import Redis

from database import init_db
from routers.analytics_routes import router as analytics_router
from routers.auth_routes import router as auth_router
from routers.bill_routes import router as bill_router
from routers.category_routes import router as category_router
from routers.menu_routes import router as menu_router
from routers.order_routes import router as order_router
from routers.setting_routes import router as setting_router
from routers.table_routes import router as table_router
from routers.upload_routes import router as upload_router
from routers.user_routes import router as user_router
from routers.ws_router import router as ws_router
from services import build_services
from utils.config import settings
from utils.error_handlers import register_exception_handlers
from utils.middleware.deprecation import CURRENT_PREFIX, LEGACY_PREFIX, LegacyApiDeprecationMiddleware
from utils.middleware.logger import LoggingMiddleware, setup_logging
from utils.middleware.rate_limit import SlidingWindowRateLimitMiddleware
from utils.responses import ok

logger = logging.getLogger(__name__)

api_router = APIRouter()
api_router.include_router(auth_router)
api_router.include_router(user_router)
api_router.include_router(category_router)
api_router.include_router(menu_router)
api_router.include_router(table_router)
api_router.include_router(order_router)
api_router.include_router(bill_router)
api_router.include_router(setting_router)
api_router.include_router(analytics_router)
api_router.include_router(upload_router)


def create_app(redis_client: Optional[Redis] = None) -> FastAPI:
    setup_logging(settings.log_level)

    app = FastAPI(title="Restaurant Ordering API", version="1.0.0")
    app.state.services = build_services()
    app.state.redis = redis_client
    if app.state.redis is None and settings.REDIS_URL:
        app.state.redis = Redis.from_url(settings.REDIS_URL)

    register_exception_handlers(app)

    # last added runs first
    app.add_middleware(LegacyApiDeprecationMiddleware)
    if app.state.redis is not None:
        app.add_middleware(
            SlidingWindowRateLimitMiddleware,
            limit=settings.RATE_LIMIT_MAX,
            window=settings.RATE_LIMIT_WINDOW_SECONDS,
        )
    else:
        logger.info("REDIS_URL not set, rate limiting disabled")
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-API-Deprecated", "X-API-Deprecation-Info", "X-API-Migration-Guide"],
    )

    app.include_router(api_router, prefix=CURRENT_PREFIX)
    app.include_router(api_router, prefix=LEGACY_PREFIX, include_in_schema=False)
    app.include_router(ws_router)

    @app.get("/health", tags=["Health"])
    def health():
        return ok({"env": settings.APP_ENV}, message="OK")

    @app.on_event("startup")
    async def startup_event():
        init_db()
        logger.info("application started in %s mode", settings.APP_ENV)

    @app.on_event("shutdown")
    async def shutdown_event():
        if app.state.redis is not None:
            await app.state.redis.aclose()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=settings.PORT)
