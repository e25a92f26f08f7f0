from typing import Optional

from fastapi import Request

from storefront.config import settings


def get_current_user_id(request: Request) -> Optional[str]:
    """
    Caller id as forwarded by the identity gateway, or None for anonymous
    requests. Session verification itself happens upstream.
    """
    value = request.headers.get(settings.AUTH_USER_HEADER)
    if value is None:
        return None
    return value.strip() or None
