import json

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from svix.webhooks import Webhook, WebhookVerificationError

from storefront.config import settings
from storefront.db import get_db
from storefront.services.user_service import UserService, UserServiceException
from storefront.utils.logging import get_logger

router = APIRouter(prefix="/api/webhooks", tags=["webhooks"])
log = get_logger("storefront.api.webhook")

SVIX_HEADERS = ("svix-id", "svix-timestamp", "svix-signature")


async def raw_body(request: Request) -> bytes:
    return await request.body()


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


@router.post("/clerk", summary="Identity provider user lifecycle events")
def identity_webhook(
    request: Request,
    body: bytes = Depends(raw_body),
    db: Session = Depends(get_db),
):
    """
    Signed user.created / user.updated / user.deleted notifications.
    Signature checking is left entirely to svix; only verified payloads reach
    UserService.
    """
    if not settings.WEBHOOK_SECRET:
        log.error("WEBHOOK_SECRET is not configured")
        return _error(500, "Webhook secret not configured")

    headers = {h: request.headers.get(h) for h in SVIX_HEADERS}
    if not all(headers.values()):
        return _error(400, "Missing svix headers")

    try:
        # verify() only checks the signature, its return value differs across svix releases
        Webhook(settings.WEBHOOK_SECRET).verify(body, headers)
        evt = json.loads(body)
    except WebhookVerificationError as e:
        log.warning("webhook verification failed: %s", e)
        return _error(400, "Webhook verification failed")
    except ValueError:
        log.warning("webhook payload is not valid JSON")
        return _error(400, "Invalid webhook payload")

    event_type = None
    try:
        event_type = evt.get("type")
        log.info("received webhook: %s", event_type)
        outcome = UserService(db).handle_event(event_type, evt.get("data") or {})
    except UserServiceException as e:
        return _error(400, str(e))
    except Exception:
        log.exception("webhook processing failed for %s", event_type)
        return _error(500, "Internal server error")

    return {"success": True, "event": event_type, "result": outcome}
