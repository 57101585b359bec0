from fastapi import APIRouter, Depends

from app.api.dependencies.services import get_image_service
from app.api.dependencies.upload_validation import ValidatedUpload, parse_image_id, validated_upload
from app.core.api_response import ErrorResponse, response_success
from app.core.exceptions import RecordNotFoundException
from app.schemas.file.image_schemas import (
    ImageDetailResponse,
    ImageListResponse,
    ImageRead,
    MessageResponse,
    UploadImageResponse,
)
from app.services.file.image_service import ImageService

# ==============================================================================
#                            API 路由定义
# ==============================================================================

router = APIRouter()

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post(
    "/upload",
    status_code=201,
    response_model=UploadImageResponse,
    responses=_ERROR_RESPONSES,
    summary="上传图片或 PDF 并登记",
)
async def upload_image(
    upload: ValidatedUpload = Depends(validated_upload),
    image_service: ImageService = Depends(get_image_service),
):
    """
    multipart 字段名为 `image`，仅接受 image/* 与 application/pdf，大小不超过 5MB。
    """
    record = await image_service.upload_image(
        data=upload.data,
        original_filename=upload.filename,
        content_type=upload.content_type,
    )
    result = UploadImageResponse(image=ImageRead.model_validate(record))
    return response_success(data=result, http_status=201)


@router.get(
    "/images",
    response_model=ImageListResponse,
    responses=_ERROR_RESPONSES,
    summary="获取全部图片记录 (按创建时间倒序)",
)
async def list_images(image_service: ImageService = Depends(get_image_service)):
    records = await image_service.get_all_images()
    result = ImageListResponse(images=[ImageRead.model_validate(r) for r in records])
    return response_success(data=result)


@router.get(
    "/images/{image_id}",
    response_model=ImageDetailResponse,
    responses=_ERROR_RESPONSES,
    summary="按 ID 获取图片记录",
)
async def get_image(
    image_id: int = Depends(parse_image_id),
    image_service: ImageService = Depends(get_image_service),
):
    record = await image_service.get_image_by_id(image_id)
    if record is None:
        raise RecordNotFoundException()
    return response_success(data=ImageDetailResponse(image=ImageRead.model_validate(record)))


@router.delete(
    "/images/{image_id}",
    response_model=MessageResponse,
    responses=_ERROR_RESPONSES,
    summary="删除图片记录及其存储对象",
)
async def delete_image(
    image_id: int = Depends(parse_image_id),
    image_service: ImageService = Depends(get_image_service),
):
    await image_service.delete_image(image_id)
    return response_success(data=MessageResponse(message="Image deleted successfully"))
