from storefront.config import settings
from storefront.db import engine
from fastapi import APIRouter
from sqlalchemy import text

router = APIRouter()


@router.get("/health", tags=["health"])
def health():
    db_ok = False
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
            db_ok = True
    except Exception:
        db_ok = False

    # the webhook still answers without a secret, but only with errors
    webhook_ok = bool(settings.WEBHOOK_SECRET)

    return {
        "status": "ok" if db_ok and webhook_ok else "degraded",
        "db": db_ok,
        "webhook": webhook_ok,
    }
