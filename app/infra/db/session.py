from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

import app.models  # noqa: F401  注册所有表模型到 SQLModel.metadata
from app.config.config_settings.config_schema import DatabaseConfig
from app.core.exceptions import ConfigurationMissingException
from app.core.logger import logger


class DatabaseSessionManager:
    """
    持有数据库引擎与 Session 工厂的句柄。

    引擎在首次使用时才创建 (DATABASE_URL 缺失时在那一刻报错)，
    之后被所有请求复用；生命周期由应用入口 (create_app 的 lifespan) 管理。
    """

    def __init__(self, config: DatabaseConfig, engine: Optional[AsyncEngine] = None):
        self.config = config
        self._engine: Optional[AsyncEngine] = engine
        self._sessionmaker: Optional[async_sessionmaker] = None

    @property
    def is_configured(self) -> bool:
        return self._engine is not None or bool(self.config.url)

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            if not self.config.url:
                raise ConfigurationMissingException(
                    "DATABASE_URL", "DATABASE_URL environment variable is not set"
                )
            self._engine = create_async_engine(self.config.url, echo=self.config.echo)
            logger.info("Database engine created.")
        return self._engine

    @property
    def sessionmaker(self) -> async_sessionmaker:
        if self._sessionmaker is None:
            self._sessionmaker = async_sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)
        return self._sessionmaker

    def session(self) -> AsyncSession:
        return self.sessionmaker()

    async def create_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Database tables ensured.")

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("Database engine disposed.")


# 获取 DB session（依赖注入用）
async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    为每个请求提供一个独立的数据库会话。
    提交由业务层显式完成；这里只负责异常回滚与关闭。
    """
    manager: DatabaseSessionManager = request.app.state.db
    session = manager.session()
    try:
        yield session
    except Exception:
        await session.rollback()
        raise
    finally:
        await session.close()
