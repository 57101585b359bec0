from typing import List, Optional

from starlette.concurrency import run_in_threadpool

from app.core.exceptions import (
    ConfigurationMissingException,
    DeleteFailedException,
    FetchFailedException,
    RecordNotFoundException,
    RecordStoreFailureException,
    StorageDeleteFailureException,
    StorageWriteFailureException,
    UploadFailedException,
)
from app.infra.storage.storage_interface import StorageClientInterface
from app.models.files.image_record import ImageRecord
from app.repo.crud.file.image_record_repo import ImageRecordRepository
from app.schemas.file.image_schemas import ImageRecordCreate
from app.services._base_service import BaseService
from app.utils.object_key import ObjectKeyGenerator, default_key_generator
from app.utils.url_builder import extract_object_name


class ImageService(BaseService):
    """
    图片上传与登记的编排层。

    对象存储与元数据库是两个没有共享事务的后端，这里只保证固定的调用顺序，
    不做补偿。两个已知的不一致窗口会以独立的日志标记记录，供离线对账:
    - ORPHAN_BLOB: 对象已写入，但记录创建失败；
    - DANGLING_RECORD: 对象已删除，但记录删除失败。
    """

    def __init__(
            self,
            storage: StorageClientInterface,
            image_repo: ImageRecordRepository,
            key_generator: Optional[ObjectKeyGenerator] = None,
    ):
        super().__init__()
        self.storage = storage
        self.image_repo = image_repo
        self.key_generator = key_generator or default_key_generator

    # --- 上传 ---

    async def upload_image(self, data: bytes, original_filename: str, content_type: str) -> ImageRecord:
        """
        上传并登记一个文件。调用前大小与 MIME 类型已经校验过。

        顺序: 生成 key -> 写对象 -> 推导 URL -> 创建记录。
        写对象失败时不会创建任何记录。
        """
        object_name = self.key_generator.generate(original_filename)

        try:
            await run_in_threadpool(self.storage.put_object, object_name, data, content_type)
            public_url = self.storage.build_final_url(object_name)
        except (StorageWriteFailureException, ConfigurationMissingException) as e:
            self.logger.error(f"Upload of '{original_filename}' as {object_name} failed: {e.message}")
            raise UploadFailedException() from e

        try:
            record = await self.image_repo.create(ImageRecordCreate(name=original_filename, url=public_url))
            await self.image_repo.commit()
        except RecordStoreFailureException as e:
            self.logger.error(
                f"ORPHAN_BLOB | bucket={self.storage.bucket_name} key={object_name} "
                f"name='{original_filename}' | object stored but record creation failed: {e.message}"
            )
            raise UploadFailedException() from e

        self.logger.info(f"Uploaded '{original_filename}' as {object_name} (record id={record.id}).")
        return record

    # --- 查询 ---

    async def get_all_images(self) -> List[ImageRecord]:
        try:
            return await self.image_repo.list_newest_first()
        except RecordStoreFailureException as e:
            self.logger.error(f"Fetching images failed: {e.message}")
            raise FetchFailedException("Failed to fetch images") from e

    async def get_image_by_id(self, image_id: int) -> Optional[ImageRecord]:
        try:
            return await self.image_repo.get_by_id(image_id)
        except RecordStoreFailureException as e:
            self.logger.error(f"Fetching image {image_id} failed: {e.message}")
            raise FetchFailedException("Failed to fetch image") from e

    # --- 删除 ---

    async def delete_image(self, image_id: int) -> None:
        """
        删除记录及其对应的对象。

        对象删除是尽力而为的: key 无法从 url 推导或对象删除失败时，仍继续删除记录，
        因为记录才是“删除意图”的权威来源。
        """
        try:
            record = await self.image_repo.get_by_id(image_id)
        except RecordStoreFailureException as e:
            self.logger.error(f"Looking up image {image_id} for deletion failed: {e.message}")
            raise DeleteFailedException() from e

        if record is None:
            raise RecordNotFoundException()

        # 回滚会让 ORM 实例过期，先取出 url
        record_url = record.url
        blob_deleted = False
        object_name = extract_object_name(record_url)
        if object_name is None:
            self.logger.warning(
                f"Cannot derive object key from url '{record_url}' (record id={image_id}), skipping object deletion."
            )
        else:
            try:
                await run_in_threadpool(self.storage.remove_object, object_name)
                blob_deleted = True
            except ConfigurationMissingException as e:
                self.logger.error(f"Deleting image {image_id} aborted: {e.message}")
                raise DeleteFailedException() from e
            except StorageDeleteFailureException as e:
                self.logger.warning(
                    f"BLOB_DELETE_FAILED | key={object_name} record id={image_id} | "
                    f"continuing with record deletion: {e.message}"
                )

        try:
            await self.image_repo.delete(record)
            await self.image_repo.commit()
        except RecordStoreFailureException as e:
            if blob_deleted:
                self.logger.error(
                    f"DANGLING_RECORD | record id={image_id} url={record_url} | "
                    f"object already deleted but record deletion failed: {e.message}"
                )
            raise DeleteFailedException() from e

        self.logger.info(f"Deleted image record {image_id} (object key={object_name}).")
