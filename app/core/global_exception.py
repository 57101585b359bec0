# app/core/global_exception.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from app.core.api_response import response_error
from app.core.exceptions import BaseBusinessException
from app.core.logger import logger
from app.core.response_codes import ResponseCodeEnum


async def business_exception_handler(request: Request, exc: BaseBusinessException):
    logger.warning(
        f"Business Exception | error: {exc.error}, message: {exc.message}, path: {request.url.path}"
    )
    return response_error(exc.code_enum, message=exc.message)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # 只返回字段位置，不回显请求内容
    fields = [".".join(str(p) for p in err.get("loc", ())) for err in exc.errors()]
    logger.warning(f"Request Validation Error | path: {request.url.path}, fields: {fields}")
    return response_error(ResponseCodeEnum.INVALID_REQUEST)


async def global_exception_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error(f"Unhandled Exception | {exc!r} | path: {request.url.path}")
    return response_error(ResponseCodeEnum.SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BaseBusinessException, business_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
