from typing import Any, Dict, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.core.logger import logger
from app.core.response_codes import ResponseCodeEnum


class ErrorResponse(BaseModel):
    """所有失败响应的统一结构。"""
    error: str
    message: str

    model_config = {
        "json_schema_extra": {
            "example": {
                "error": "upload_failed",
                "message": "Failed to upload image"
            }
        }
    }


# === 成功响应 ===
def response_success(
    data: Any = None,
    http_status: int = 200,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    # Pydantic 模型按 alias 序列化 (created_at -> createdAt)
    encoded_data = jsonable_encoder(data, by_alias=True)
    return JSONResponse(status_code=http_status, content=encoded_data, headers=headers)


# === 错误响应 ===
def response_error(
    code: ResponseCodeEnum,
    message: Optional[str] = None,
    http_status: Optional[int] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    final_message = message or code.message
    final_status = http_status or code.status_code
    logger.warning(f"Response Error | http_status: {final_status}, error: {code.error}, message: {final_message}")

    return JSONResponse(
        status_code=final_status,
        content=ErrorResponse(error=code.error, message=final_message).model_dump(),
        headers=headers,
    )
