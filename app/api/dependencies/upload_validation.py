import re
from dataclasses import dataclass
from typing import Optional

from fastapi import File, Path, Request, UploadFile

from app.config.config_settings.config_schema import UploadConfig
from app.core.exceptions import (
    FileTooLargeException,
    InvalidImageIdException,
    NoFileUploadedException,
    RecordNotFoundException,
    UnsupportedFileTypeException,
)

_IMAGE_ID_PATTERN = re.compile(r"\d+")
# image_record.id 是 32 位 INTEGER 列，超出范围的 id 不可能存在
MAX_IMAGE_ID = 2 ** 31 - 1


@dataclass(frozen=True)
class ValidatedUpload:
    data: bytes
    filename: str
    content_type: str


def is_allowed_content_type(content_type: Optional[str], allowed_prefixes) -> bool:
    """以 '/' 结尾的条目按前缀匹配 (image/*)，其余条目要求完全相等 (application/pdf)。"""
    if not content_type:
        return False
    mime = content_type.split(";", 1)[0].strip().lower()
    for allowed in allowed_prefixes:
        if allowed.endswith("/"):
            if mime.startswith(allowed):
                return True
        elif mime == allowed:
            return True
    return False


async def validated_upload(
        request: Request,
        image: Optional[UploadFile] = File(None, description="待上传的图片或 PDF 文件"),
) -> ValidatedUpload:
    """
    在请求进入编排层之前完成校验: 必须有文件、MIME 类型受允许、大小不超过上限。
    任一条件不满足都不会触发任何存储调用。
    """
    upload_conf: UploadConfig = request.app.state.config.upload

    if image is None or not image.filename:
        raise NoFileUploadedException()

    if not is_allowed_content_type(image.content_type, upload_conf.allowed_type_prefixes):
        raise UnsupportedFileTypeException()

    max_bytes = upload_conf.max_file_size_bytes
    # 多读一个字节即可判断是否超限，不把超大文件整个读进内存
    data = await image.read(max_bytes + 1)
    await image.close()
    if len(data) > max_bytes:
        raise FileTooLargeException(
            f"File exceeds the maximum allowed size of {upload_conf.max_file_size_mb}MB"
        )

    return ValidatedUpload(data=data, filename=image.filename, content_type=image.content_type)


def parse_image_id(image_id: str = Path(..., description="图片记录 ID")) -> int:
    if not _IMAGE_ID_PATTERN.fullmatch(image_id):
        raise InvalidImageIdException()
    parsed = int(image_id)
    if parsed > MAX_IMAGE_ID:
        raise RecordNotFoundException()
    return parsed
