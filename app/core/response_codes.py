from enum import Enum


class ResponseCodeEnum(Enum):
    """
    响应码枚举: (HTTP 状态码, 机器可读的 error 标签, 默认的人类可读信息)。
    """

    # === 通用响应码 ===
    INVALID_REQUEST = (400, "invalid_request", "Invalid request")
    NOT_FOUND = (404, "not_found", "Resource not found")
    SERVER_ERROR = (500, "internal_error", "Internal server error")

    # === 上传校验 ===
    NO_FILE_UPLOADED = (400, "no_file_uploaded", "No file uploaded")
    UNSUPPORTED_FILE_TYPE = (400, "unsupported_file_type", "Only image and PDF files are allowed")
    FILE_TOO_LARGE = (400, "file_too_large", "File exceeds the maximum allowed size")
    INVALID_IMAGE_ID = (400, "invalid_image_id", "Invalid image ID")

    # === 元数据记录 ===
    IMAGE_NOT_FOUND = (404, "image_not_found", "Image not found")
    RECORD_STORE_FAILED = (500, "record_store_failed", "Metadata store operation failed")

    # === 对象存储 ===
    STORAGE_WRITE_FAILED = (500, "storage_write_failed", "Failed to write object to storage")
    STORAGE_DELETE_FAILED = (500, "storage_delete_failed", "Failed to delete object from storage")
    STORAGE_READ_FAILED = (500, "storage_read_failed", "Failed to read object from storage")
    BLOB_NOT_FOUND = (404, "blob_not_found", "Object not found in storage")

    # === 配置 ===
    CONFIGURATION_MISSING = (500, "configuration_missing", "Required configuration value is missing")

    # === 编排层的通用操作失败 ===
    UPLOAD_FAILED = (500, "upload_failed", "Failed to upload image")
    FETCH_FAILED = (500, "fetch_failed", "Failed to fetch images")
    DELETE_FAILED = (500, "delete_failed", "Failed to delete image")

    def __init__(self, status_code: int, error: str, message: str):
        self._status_code = status_code
        self._error = error
        self._message = message

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def error(self) -> str:
        return self._error

    @property
    def message(self) -> str:
        return self._message
