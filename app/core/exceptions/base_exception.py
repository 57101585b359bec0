# app/core/exceptions/base_exception.py

from typing import Optional

from app.core.response_codes import ResponseCodeEnum


class BaseBusinessException(Exception):
    code_enum: ResponseCodeEnum = ResponseCodeEnum.SERVER_ERROR

    def __init__(
            self,
            code_enum: Optional[ResponseCodeEnum] = None,
            message: Optional[str] = None,
    ):
        if code_enum is not None:
            self.code_enum = code_enum
        self.error = self.code_enum.error
        self.status_code = self.code_enum.status_code
        self.message = message or self.code_enum.message
        super().__init__(self.message)

    def __str__(self):
        return f"[{self.error}] {self.message}"


class NotFoundException(BaseBusinessException):
    """
    当请求的资源不存在时抛出。
    """
    code_enum = ResponseCodeEnum.NOT_FOUND

    def __init__(self, message: Optional[str] = None):
        super().__init__(message=message)


class ValidationFailureException(BaseBusinessException):
    """
    请求在进入业务编排层之前就被拒绝 (ID 格式错误、MIME 类型不允许、文件超限)。
    """
    code_enum = ResponseCodeEnum.INVALID_REQUEST

    def __init__(self, message: Optional[str] = None):
        super().__init__(message=message)


class ConfigurationMissingException(BaseBusinessException):
    """
    必需的环境配置缺失；在首次使用时惰性抛出，而不是在进程启动时。
    """
    code_enum = ResponseCodeEnum.CONFIGURATION_MISSING

    def __init__(self, setting_name: str, message: Optional[str] = None):
        self.setting_name = setting_name
        super().__init__(message=message or f"Required configuration '{setting_name}' is not set")
