from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field


# 【内部】用于创建记录的 Schema, id 与 created_at 由数据库/模型分配
class ImageRecordCreate(BaseModel):
    name: str
    url: str


class ImageRead(BaseModel):
    """
    用于从 API 返回图片记录信息的模型。
    """
    id: int
    name: str = Field(..., description="文件的原始名称")
    url: str = Field(..., description="文件的完整可访问 URL")
    created_at: datetime = Field(..., serialization_alias="createdAt", description="创建时间")

    # 允许从 ORM 对象模型进行转换
    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "name": "cat.png",
                "url": "https://storage.googleapis.com/my-bucket/1718000000000.png",
                "createdAt": "2024-06-10T08:00:00Z",
            }
        },
    )


class UploadImageResponse(BaseModel):
    """`POST /api/upload` 的响应体。"""
    message: str = "Upload successful"
    image: ImageRead


class ImageListResponse(BaseModel):
    """`GET /api/images` 的响应体。"""
    images: List[ImageRead]


class ImageDetailResponse(BaseModel):
    """`GET /api/images/{id}` 的响应体。"""
    image: ImageRead


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str = "ok"
    message: str = "Server is running"
