from typing import Optional

from sqlalchemy import Text
from sqlmodel import Field

from app.models.base.timestamp_mixin import TimestampMixin


class ImageRecord(TimestampMixin, table=True):
    """
    图片/文件记录实体类。
    在数据库中存储上传到对象存储的文件的元数据；记录创建后不再修改。
    对象 key 不单独存储，而是从 url 的最后一段还原。
    """
    __tablename__ = "image_record"

    id: Optional[int] = Field(default=None, primary_key=True)
    # 原始文件名对服务是不透明的，不限制长度
    name: str = Field(..., sa_type=Text, description="客户端上传时的原始文件名")
    url: str = Field(..., max_length=1024, description="对象的公开访问地址，由 bucket + key 推导")
