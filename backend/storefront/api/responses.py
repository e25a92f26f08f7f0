from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from storefront.schemas.result_schema import ActionResult
from storefront.services.errors import InsufficientStock, StorefrontError

STATUS_BY_CODE = {
    "unauthorized": 401,
    "forbidden": 403,
    "not_found": 404,
    "inactive": 400,
    "invalid_quantity": 400,
    "empty_cart": 400,
    "insufficient_stock": 409,
    "cart_update_failed": 500,
    "order_failed": 500,
}


def success(data: Any = None, message: Optional[str] = None) -> dict:
    return ActionResult(
        success=True, message=message, data=jsonable_encoder(data)
    ).model_dump(exclude_none=True)


def failure(exc: StorefrontError) -> JSONResponse:
    body = ActionResult(success=False, error=exc.message, code=exc.code)
    if isinstance(exc, InsufficientStock) and exc.items:
        body.items = exc.items
    return JSONResponse(
        status_code=STATUS_BY_CODE.get(exc.code, 500),
        content=body.model_dump(exclude_none=True),
    )


def unexpected() -> JSONResponse:
    return failure(StorefrontError())
