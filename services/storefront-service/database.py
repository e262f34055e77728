"""Database connection and session management."""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from typing import Any, Dict, Generator
import logging

from config import DATABASE_URL, SEED_SAMPLE_DATA, STORE_SETTINGS_SCOPE
from models import Base, Product, Setting

logger = logging.getLogger(__name__)


def _engine_options(url: str) -> Dict[str, Any]:
    """Connection options for the configured backend."""
    if url.startswith("sqlite"):
        # Sessions are opened from worker threads during checkout
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": 10,
        "max_overflow": 20,
        "pool_pre_ping": True,  # Verify connections before use
        "pool_recycle": 3600,  # Recycle connections after 1 hour
        "pool_timeout": 30,
    }


engine = create_engine(DATABASE_URL, **_engine_options(DATABASE_URL))

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """
    Dependency for getting database session.

    Yields:
        Database session
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


SAMPLE_PRODUCTS = [
    {"id": "p1", "name_en": "Robusta Coffee Beans", "name_vi": "Cà phê Robusta",
     "price": 3.50, "category_id": "coffee"},
    {"id": "p2", "name_en": "Arabica Coffee Beans", "name_vi": "Cà phê Arabica",
     "price": 5.25, "category_id": "coffee"},
    {"id": "p3", "name_en": "Jasmine Green Tea", "name_vi": "Trà xanh hoa nhài",
     "price": 4.00, "category_id": "tea"},
    {"id": "p4", "name_en": "Phin Coffee Filter", "name_vi": "Phin cà phê",
     "price": 6.75, "category_id": "equipment"},
    {"id": "p5", "name_en": "Lotus Tea", "name_vi": "Trà sen",
     "price": 8.90, "category_id": "tea"},
]

DEFAULT_STORE_SETTINGS = {
    "paymentMethods": {
        "cod": {"enabled": True},
        "bankTransfer": {
            "enabled": False,
            "bankName": "",
            "accountName": "",
            "accountNumber": "",
            "instruction": "",
        },
        "momo": {"enabled": False, "phone": "", "qrImageUrl": "", "instruction": ""},
        "custom": [],
    }
}


def init_db() -> None:
    """Initialize database tables and seed data."""
    Base.metadata.create_all(bind=engine)

    if not SEED_SAMPLE_DATA:
        return

    db = SessionLocal()
    try:
        if db.query(Product).count() == 0:
            db.add_all([Product(**product) for product in SAMPLE_PRODUCTS])
            logger.info("Seeded database with sample products")
        if db.get(Setting, STORE_SETTINGS_SCOPE) is None:
            db.add(Setting(scope=STORE_SETTINGS_SCOPE, value=DEFAULT_STORE_SETTINGS))
            logger.info("Seeded default store settings")
        db.commit()
    finally:
        db.close()
