from app.core.exceptions.base_exception import (
    BaseBusinessException,
    NotFoundException,
    ValidationFailureException,
)
from app.core.response_codes import ResponseCodeEnum

# === 上传校验异常 ===
class NoFileUploadedException(ValidationFailureException):
    code_enum = ResponseCodeEnum.NO_FILE_UPLOADED

class UnsupportedFileTypeException(ValidationFailureException):
    code_enum = ResponseCodeEnum.UNSUPPORTED_FILE_TYPE

class FileTooLargeException(ValidationFailureException):
    code_enum = ResponseCodeEnum.FILE_TOO_LARGE

class InvalidImageIdException(ValidationFailureException):
    code_enum = ResponseCodeEnum.INVALID_IMAGE_ID


# === 元数据记录异常 ===
class RecordNotFoundException(NotFoundException):
    code_enum = ResponseCodeEnum.IMAGE_NOT_FOUND

class RecordStoreFailureException(BaseBusinessException):
    def __init__(self, message: str = None):
        super().__init__(ResponseCodeEnum.RECORD_STORE_FAILED, message=message)


# === 对象存储异常 ===
class StorageWriteFailureException(BaseBusinessException):
    def __init__(self, message: str = None):
        super().__init__(ResponseCodeEnum.STORAGE_WRITE_FAILED, message=message)

class StorageDeleteFailureException(BaseBusinessException):
    def __init__(self, message: str = None):
        super().__init__(ResponseCodeEnum.STORAGE_DELETE_FAILED, message=message)

class StorageReadFailureException(BaseBusinessException):
    def __init__(self, message: str = None):
        super().__init__(ResponseCodeEnum.STORAGE_READ_FAILED, message=message)

class BlobNotFoundException(NotFoundException):
    code_enum = ResponseCodeEnum.BLOB_NOT_FOUND


# === 编排层操作失败 (对调用方的统一信号) ===
class UploadFailedException(BaseBusinessException):
    def __init__(self, message: str = None):
        super().__init__(ResponseCodeEnum.UPLOAD_FAILED, message=message)

class FetchFailedException(BaseBusinessException):
    def __init__(self, message: str = None):
        super().__init__(ResponseCodeEnum.FETCH_FAILED, message=message)

class DeleteFailedException(BaseBusinessException):
    def __init__(self, message: str = None):
        super().__init__(ResponseCodeEnum.DELETE_FAILED, message=message)
