import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from categories import router as categories_router
from core import db, errors, settings
from core.log import configure_logging
from core.rate_limit import RateLimitMiddleware
from core.security_headers import SecurityHeadersMiddleware
from pois import router as pois_router

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process; refuse to start without it.
    try:
        await db.init_pool()
    except Exception:
        logger.exception("db_pool_failed")
        raise
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(lifespan=lifespan)

# Middleware added last runs first: CORS, then security headers, then rate
# limiting, then the unhandled-error catcher closest to the routes.
app.add_middleware(errors.UnhandledErrorMiddleware)
app.add_middleware(RateLimitMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type"],
)

app.include_router(categories_router.router, tags=["categories"])
app.include_router(pois_router.router, tags=["pois"])

errors.setup_exception_handlers(app)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/test", response_class=PlainTextResponse)
def route_test() -> str:
    return "Route test OK"


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=settings.port(), proxy_headers=settings.trust_proxy())
