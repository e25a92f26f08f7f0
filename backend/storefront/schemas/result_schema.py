from typing import Any, List, Optional

from pydantic import BaseModel


class ActionResult(BaseModel):
    """
    Envelope every cart/order handler answers with.

    success=True  -> optional `message` and `data`
    success=False -> `error` (human readable) and `code` (machine readable);
                     `items` lists offending products for insufficient stock
    """

    success: bool
    message: Optional[str] = None
    data: Optional[Any] = None
    error: Optional[str] = None
    code: Optional[str] = None
    items: Optional[List[str]] = None
