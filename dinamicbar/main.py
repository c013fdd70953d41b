from pathlib import Path
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.staticfiles import StaticFiles
import logging

# Import database components
from dinamicbar.database.database import engine, Base

# Import middleware
from dinamicbar.common.middleware import RequestTimingMiddleware, SecurityHeadersMiddleware

# Import routers
from dinamicbar.modules.auth.router import auth_router, users_router
from dinamicbar.modules.store.router import store_router
from dinamicbar.modules.categories.router import categories_router
from dinamicbar.modules.products.router import product_router
from dinamicbar.modules.suppliers.router import suppliers_router
from dinamicbar.modules.purchases.router import purchases_router
from dinamicbar.modules.tables.router import tables_router, table_groups_router
from dinamicbar.modules.tabs.router import tabs_router
from dinamicbar.modules.sales.router import sales_router
from dinamicbar.modules.cash_register.router import cash_register_router
from dinamicbar.modules.vouchers.router import vouchers_router
from dinamicbar.modules.accounting.router import accounting_router
from dinamicbar.modules.data_exchange.router import data_exchange_router

# Import models for table creation
import dinamicbar.models  # noqa: F401

from dinamicbar.core.config import settings

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# FastAPI app
app = FastAPI(
    title="DinamicBar API",
    description="Punto de venta para bares y restaurantes: inventario, mesas, cuentas, ventas y caja",
    version="1.0.0",
    docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None
)

# Add middleware (order matters!)
app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestTimingMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router, prefix="/api/auth", tags=["Auth"])
app.include_router(users_router, prefix="/api/users", tags=["Users"])
app.include_router(store_router, prefix="/api/store", tags=["Store"])
app.include_router(categories_router, prefix="/api/inventory/categories")
app.include_router(product_router, prefix="/api/inventory/products")
app.include_router(suppliers_router, prefix="/api/suppliers")
app.include_router(purchases_router, prefix="/api/purchases")
app.include_router(tables_router, prefix="/api/tables")
app.include_router(table_groups_router, prefix="/api/table-groups")
app.include_router(tabs_router, prefix="/api/tabs")
app.include_router(sales_router, prefix="/api/sales")
app.include_router(cash_register_router, prefix="/api/cash-register")
app.include_router(vouchers_router, prefix="/api/vouchers")
app.include_router(accounting_router, prefix="/api/accounting")
app.include_router(data_exchange_router, prefix="/api")

# Uploaded images
Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

# Create database tables (only for development - use migrations in production)
if settings.ENVIRONMENT == "development":
    Base.metadata.create_all(bind=engine)

@app.get("/")
async def read_root():
    return {
        "message": "DinamicBar API is running",
        "version": "1.0.0",
        "environment": settings.ENVIRONMENT
    }

@app.get("/health")
async def health_check():
    return {"status": "healthy", "environment": settings.ENVIRONMENT}

@app.on_event("startup")
async def startup_event():
    logger.info("DinamicBar API starting up...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Debug mode: {settings.DEBUG}")

@app.on_event("shutdown")
async def shutdown_event():
    logger.info("DinamicBar API shutting down...")
