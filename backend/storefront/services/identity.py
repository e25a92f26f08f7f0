from typing import Optional

from storefront.services.errors import Unauthorized


def require_user(user_id: Optional[str]) -> str:
    """Return the caller id or raise Unauthorized when there is no session."""
    if not user_id or not user_id.strip():
        raise Unauthorized()
    return user_id.strip()
