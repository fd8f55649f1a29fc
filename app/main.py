import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.core.errors import register_error_handlers
from app.core.logging_config import configure_logging
from app.db.base import Base, engine
from app.db.models import booking, hoarding, review, user  # noqa: F401  (register tables)
from app.api.routes import auth
from app.api.routes import users as users_router
from app.api.routes import hoardings as hoardings_router
from app.api.routes import bookings as bookings_router
from app.api.routes import review as review_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    Base.metadata.create_all(bind=engine)
    logger.info("Hoarding booking API started")
    yield


app = FastAPI(title="Hoarding Booking Platform API", lifespan=lifespan)

if settings.cors_origin_list:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

register_error_handlers(app)


@app.get("/api/health")
def health():
    return {"status": "ok"}


app.include_router(auth.router, prefix="/api")
app.include_router(users_router.router, prefix="/api")
app.include_router(hoardings_router.router, prefix="/api")
app.include_router(bookings_router.router, prefix="/api")
app.include_router(review_router.router, prefix="/api")
