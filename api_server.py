#!/usr/bin/env python
"""
FastAPI server for the AgerApp API
Assembles middleware, error handlers, static uploads and the /v1 routers
"""
import os
import sys
import logging
from pathlib import Path

# Ensure src directory is in Python path for Docker deployments and local runs
src_path = os.path.join(os.path.dirname(__file__), "src")
if os.path.exists(src_path) and src_path not in sys.path:
    sys.path.insert(0, src_path)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

from agerapp_api import __version__
from agerapp_api.config import config
from agerapp_api.logging_config import setup_logging, RequestIDMiddleware
from agerapp_api.middleware.error_handler import register_exception_handlers
from agerapp_api.database import init_db
from agerapp_api.user_routes import router as user_router
from agerapp_api.product_routes import router as product_router
from agerapp_api.customer_routes import router as customer_router
from agerapp_api.invoice_routes import router as invoice_router
from agerapp_api.analytics_routes import router as analytics_router, operations_router
from agerapp_api.bank_routes import router as bank_router
from agerapp_api.blog_routes import router as blog_router
from agerapp_api.community_routes import router as community_router
from agerapp_api.contact_routes import router as contact_router

setup_logging(env=config.ENV, log_level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Deployed databases are migrated with alembic
if config.is_dev or config.is_test:
    try:
        init_db()
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)
        raise

app = FastAPI(title="AgerApp API", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIDMiddleware)

register_exception_handlers(app)

uploads_dir = Path(config.UPLOADS_DIR)
uploads_dir.mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=str(uploads_dir)), name="uploads")

app.include_router(user_router)
app.include_router(product_router)
app.include_router(customer_router)
app.include_router(invoice_router)
app.include_router(analytics_router)
app.include_router(operations_router)
app.include_router(bank_router)
app.include_router(blog_router)
app.include_router(community_router)
app.include_router(contact_router)


@app.get("/", include_in_schema=False)
async def root():
    return RedirectResponse(url="/v1")


@app.get("/v1")
async def index():
    """Welcome envelope; carries no data field"""
    return {"status": "success", "message": "Welcome to AgerApp API", "error": False}


@app.get("/health")
async def health():
    """Health check endpoint for load balancers and monitoring"""
    return {"status": "healthy", "service": "agerapp-api", "version": __version__}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
