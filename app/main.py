from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from app.api.router import api_router
from app.config.config_settings.config_manager import get_app_config
from app.config.config_settings.config_schema import AppConfig
from app.core.global_exception import register_exception_handlers
from app.core.logger import logger, setup_logging
from app.core.middleware import RequestLoggingMiddleware
from app.infra.db.session import DatabaseSessionManager
from app.infra.storage.storage_factory import create_storage_client
from app.infra.storage.storage_interface import StorageClientInterface
from app.schemas.file.image_schemas import HealthResponse


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 应用启动中，正在初始化资源...")
    config: AppConfig = app.state.config
    db: DatabaseSessionManager = app.state.db

    # 初始化数据库 (未配置 DATABASE_URL 时推迟到首次访问再报错)
    if not db.is_configured:
        logger.warning("DATABASE_URL is not set; metadata operations will fail on first use.")
    elif config.database.auto_create_tables:
        await db.create_tables()
    logger.info("✅ 所有资源初始化完成")

    yield

    # 应用关闭，释放资源
    await db.dispose()
    logger.info("🛑 应用已关闭")


def create_app(
        config: Optional[AppConfig] = None,
        storage_client: Optional[StorageClientInterface] = None,
        db: Optional[DatabaseSessionManager] = None,
) -> FastAPI:
    """
    应用工厂。共享的存储客户端与数据库句柄在这里显式创建并挂到 app.state 上，
    通过依赖注入传给路由；测试可以直接传入替身。
    """
    config = config or get_app_config()
    setup_logging(config.logging)

    app = FastAPI(title="Image Upload Service", lifespan=lifespan)
    app.state.config = config
    app.state.storage_client = storage_client or create_storage_client(config.storage)
    app.state.db = db or DatabaseSessionManager(config.database)

    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.include_router(api_router, prefix=config.server.api_prefix)

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health():
        return HealthResponse()

    return app


app = create_app()


def main() -> None:
    config = get_app_config()
    uvicorn.run(
        "app.main:app",
        host=config.server.host,
        port=config.server.port,
        log_level=config.server.log_level.lower(),
    )


if __name__ == "__main__":
    main()
