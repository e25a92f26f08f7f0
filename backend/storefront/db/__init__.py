import importlib

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, declarative_base

from storefront.config import settings
from storefront.utils.logging import get_logger

log = get_logger("storefront.db")

DATABASE_URL = settings.DATABASE_URL
_is_sqlite = DATABASE_URL.startswith("sqlite")

engine = create_engine(
    DATABASE_URL,
    future=True,
    echo=False,
    connect_args={"check_same_thread": False} if _is_sqlite else {},
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

if _is_sqlite:
    # SQLite ignores FOREIGN KEY clauses (ON DELETE CASCADE / SET NULL) unless asked
    @event.listens_for(engine, "connect")
    def _sqlite_on_connect(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# every model module must be imported before create_all so metadata is populated
MODEL_MODULES = [
    "storefront.models.product",
    "storefront.models.cart_item",
    "storefront.models.order",
    "storefront.models.user",
]


def init_db(reset: bool = False):
    """
    Initialize DB schema.

    Behavior:
      - reset=True (or RESET_DB=1) drops every table first, then recreates.
      - Otherwise, leave existing tables in place and create missing ones.
    """
    for mod in MODEL_MODULES:
        importlib.import_module(mod)

    if reset or settings.RESET_DB:
        log.info("Resetting database (dropping all tables)")
        Base.metadata.drop_all(bind=engine)

    Base.metadata.create_all(bind=engine)
    log.debug("Database initialized: %s", ", ".join(sorted(Base.metadata.tables)))


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
