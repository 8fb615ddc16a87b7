import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from agridirect.api import certificates, consumers, farmers, orders, products
from agridirect.core.config import Settings, get_settings
from agridirect.core.errors import register_error_handlers
from agridirect.core.logging_setup import setup_logging
from agridirect.db.init import init_db
from agridirect.services.qr import QRBinder

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings)

    # fail at startup, not per request, when QR codes could not be addressed
    QRBinder(settings)

    upload_dir = Path(settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)
    settings.qr_dir.mkdir(parents=True, exist_ok=True)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db()
        logger.info("AgriDirect started, verification URLs under %s", settings.BASE_URL)
        yield

    app = FastAPI(
        title=settings.APP_NAME,
        description="Farmer-to-consumer marketplace with QR product authenticity certificates",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    # Include routers
    app.include_router(farmers.router, prefix="/farmers", tags=["farmers"])
    app.include_router(consumers.router, prefix="/consumers", tags=["consumers"])
    app.include_router(products.router, prefix="/products", tags=["products"])
    app.include_router(certificates.router, prefix="/product", tags=["certificates"])
    app.include_router(orders.router, prefix="/orders", tags=["orders"])

    app.mount("/uploads", StaticFiles(directory=str(upload_dir)), name="uploads")

    @app.get("/")
    def read_root():
        return {"message": "Welcome to AgriDirect API"}

    return app


app = create_app()
