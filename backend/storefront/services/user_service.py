from typing import Dict, Optional

from sqlalchemy.orm import Session

from storefront.repositories.cart_repo import CartRepository
from storefront.repositories.order_repo import OrderRepository
from storefront.repositories.user_repo import UserRepository
from storefront.utils.logging import get_logger
from storefront.utils.transactions import smart_transaction

log = get_logger("storefront.webhook")


class UserServiceException(Exception):
    pass


def _primary_email(data: Dict) -> Optional[str]:
    addresses = data.get("email_addresses") or []
    primary_id = data.get("primary_email_address_id")
    for a in addresses:
        if a.get("id") == primary_id:
            return a.get("email_address")
    return addresses[0].get("email_address") if addresses else None


def _display_name(data: Dict) -> Optional[str]:
    parts = [data.get("first_name"), data.get("last_name")]
    name = " ".join(p for p in parts if p)
    return name or data.get("username")


class UserService:
    """Applies identity-provider lifecycle events (already verified) to local rows."""

    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
        self.cart_repo = CartRepository(db)
        self.order_repo = OrderRepository(db)

    def handle_event(self, event_type: str, data: Dict) -> str:
        """Returns a short description of what was done, for the response/log."""
        clerk_id = (data or {}).get("id")
        if event_type in ("user.created", "user.updated", "user.deleted") and not clerk_id:
            raise UserServiceException(f"{event_type} event without user id")

        if event_type in ("user.created", "user.updated"):
            with smart_transaction(self.db):
                self.user_repo.upsert(clerk_id, _primary_email(data), _display_name(data))
            self.db.commit()
            log.info("user %s synced (%s)", clerk_id, event_type)
            return "synced"

        if event_type == "user.deleted":
            return self.delete_user(clerk_id)

        log.info("unhandled event type: %s", event_type)
        return "ignored"

    def delete_user(self, clerk_id: str) -> str:
        with smart_transaction(self.db):
            carts = self.cart_repo.remove_all_for_user(clerk_id)
            orders = self.order_repo.remove_all_for_user(clerk_id)
            self.user_repo.delete_by_clerk_id(clerk_id)
        self.db.commit()
        log.info(
            "user %s deleted (cart lines=%d, orders=%d)", clerk_id, carts, orders
        )
        return "deleted"
