# bookstore/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI

from bookstore.core.config import get_settings
from bookstore.database import create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from bookstore.models import user as _user_models  # noqa: F401
from bookstore.models import address as _address_models  # noqa: F401
from bookstore.models import catalog as _catalog_models  # noqa: F401
from bookstore.models import cart as _cart_models  # noqa: F401
from bookstore.models import gift_card as _gift_card_models  # noqa: F401
from bookstore.models import promo_code as _promo_code_models  # noqa: F401

# Routers
from bookstore.routers.users import router as users_router
from bookstore.routers.books import router as books_router
from bookstore.routers.cart import router as cart_router
from bookstore.routers.gift_cards import router as gift_cards_router
from bookstore.routers.gift_cards import admin_router as admin_gift_cards_router
from bookstore.routers.admin_promo_codes import router as admin_promo_codes_router

settings = get_settings()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity and create tables.
    """
    logger.info("Startup: connecting to database...")
    try:
        create_db_and_tables()
        logger.info("Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error(f"Startup: DB connection FAILED: {e}")
        raise
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


# --- CORS configuration ---
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Versioned API prefix, e.g. /api/v1
app.include_router(users_router, prefix=settings.API_V1_STR)
app.include_router(books_router, prefix=settings.API_V1_STR)
app.include_router(cart_router, prefix=settings.API_V1_STR)
app.include_router(gift_cards_router, prefix=settings.API_V1_STR)
app.include_router(admin_gift_cards_router, prefix=settings.API_V1_STR)
app.include_router(admin_promo_codes_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "bookstore-backend"}
