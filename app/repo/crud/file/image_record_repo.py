from typing import List

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.files.image_record import ImageRecord
from app.repo.crud.common.base_repo import BaseRepository
from app.schemas.file.image_schemas import ImageRecordCreate


class ImageRecordRepository(BaseRepository[ImageRecord, ImageRecordCreate]):
    """
    ImageRecordRepository 提供了所有与图片记录数据库操作相关的方法。
    """
    def __init__(self, db: AsyncSession):
        super().__init__(db, ImageRecord)

    async def list_newest_first(self) -> List[ImageRecord]:
        """按 created_at 倒序返回全部记录，id 倒序作为并列时的稳定次序。"""
        return await self.list(order_by=["-created_at", "-id"])
