# app/api/dependencies/services.py
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.infra.db.session import get_session
from app.infra.storage.storage_interface import StorageClientInterface
from app.repo.crud.file.image_record_repo import ImageRecordRepository
from app.services.file.image_service import ImageService


def get_storage_client(request: Request) -> StorageClientInterface:
    """应用级共享的存储客户端，由 create_app 创建并挂在 app.state 上。"""
    return request.app.state.storage_client


def get_image_repository(
    session: AsyncSession = Depends(get_session),
) -> ImageRecordRepository:
    return ImageRecordRepository(session)


def get_image_service(
    storage: StorageClientInterface = Depends(get_storage_client),
    image_repo: ImageRecordRepository = Depends(get_image_repository),
) -> ImageService:
    """Dependency provider for ImageService."""
    return ImageService(storage=storage, image_repo=image_repo)
