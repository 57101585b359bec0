from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select

from app.core.exceptions import RecordStoreFailureException
from app.core.logger import logger

ModelType = TypeVar("ModelType", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)


class BaseRepository(Generic[ModelType, CreateSchemaType]):
    """
    通用的单表 Repository。
    所有 SQLAlchemy 层面的错误都会被转换为 RecordStoreFailureException。
    """

    def __init__(self, db: AsyncSession, model: Type[ModelType]):
        self.db = db
        self.model = model

    # ==========================
    # 事务控制方法 (Transaction Control)
    # ==========================

    async def commit(self):
        """提交当前数据库会话中的所有更改。"""
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            logger.error(f"[commit] Failed: {e}")
            await self.rollback()
            raise RecordStoreFailureException("Failed to commit changes to the metadata store.") from e

    async def rollback(self):
        """回滚当前数据库会话中的所有更改。"""
        try:
            await self.db.rollback()
        except SQLAlchemyError as e:
            logger.error(f"[rollback] Failed: {e}")

    # ==========================
    # 数据创建方法 (Create)
    # ==========================

    async def create(self, obj_in: Union[CreateSchemaType, Dict[str, Any]]) -> ModelType:
        """
        创建一个新的对象实例，flush 后由数据库分配主键。
        """
        create_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        db_obj = self.model(**create_data)
        try:
            self.db.add(db_obj)
            await self.db.flush()
            await self.db.refresh(db_obj)
        except SQLAlchemyError as e:
            logger.error(f"[create] Failed: {e}")
            await self.rollback()
            raise RecordStoreFailureException(f"Failed to create {self.model.__name__}.") from e
        return db_obj

    # ==========================
    # 数据删除方法 (Delete)
    # ==========================

    async def delete(self, db_obj: ModelType) -> None:
        """
        从数据库中物理删除一个对象。
        """
        try:
            await self.db.delete(db_obj)
            await self.db.flush()
        except SQLAlchemyError as e:
            logger.error(f"[delete] Failed: {e}")
            await self.rollback()
            raise RecordStoreFailureException(f"Failed to delete {self.model.__name__}.") from e

    # ==========================
    # 数据查询方法 (Query)
    # ==========================

    def _base_stmt(self):
        return select(self.model)

    async def get_by_id(self, id: Any) -> Optional[ModelType]:
        stmt = self._base_stmt().where(self.model.id == id)
        return await self._run_and_scalar(stmt, "get_by_id")

    async def list(
            self, skip: int = 0, limit: Optional[int] = None, order_by: Optional[List[str]] = None
    ) -> List[ModelType]:
        stmt = self.apply_ordering(self._base_stmt(), order_by or []).offset(skip)
        if limit is not None:
            stmt = stmt.limit(limit)
        return await self._run_and_scalars(stmt, "list")

    def apply_ordering(self, stmt, order_by: List[str]):
        if not order_by:
            return stmt.order_by(desc(self.model.created_at))  # 默认排序

        for sort_field in order_by:
            descending = sort_field.startswith('-')
            column = getattr(self.model, sort_field.lstrip('-'), None)
            if column is not None:
                stmt = stmt.order_by(desc(column) if descending else column)
        return stmt

    async def _run_and_scalar(self, stmt, method: str):
        try:
            result = await self.db.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"[{method}] Failed: {e}")
            raise RecordStoreFailureException(f"Metadata store query '{method}' failed.") from e

    async def _run_and_scalars(self, stmt, method: str):
        try:
            result = await self.db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"[{method}] Failed: {e}")
            raise RecordStoreFailureException(f"Metadata store query '{method}' failed.") from e
