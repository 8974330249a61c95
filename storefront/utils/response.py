from fastapi.encoders import jsonable_encoder
from typing import Any, Optional


def success(
    data: Optional[Any] = None,
    message: str = "Success",
):
    response = {
        "success": True,
        "message": message,
        "data": data,
        "errors": None,
    }

    # Ensure SQLAlchemy models, datetimes, Decimals, etc. are JSON-serializable.
    return jsonable_encoder(response)
