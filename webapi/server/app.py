"""
图片转换服务 - FastAPI 主应用

启动方式:
    cd image-converter-api
    python -m webapi.server.app

或通过 uvicorn 应用工厂启动:
    python -m uvicorn --factory webapi.server.app:create_app --port 3000
"""

from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

from image_converter.config import Settings
from image_converter.logging_config import get_logger, setup_logging
from image_converter.upload_validator import UploadTypeValidator
from webapi.server.error_handlers import register_error_handlers
from webapi.server.routers import convert

SERVICE_NAME = "Image Converter API"

logger = get_logger("server")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """创建应用实例（配置由实例持有，不依赖模块级全局状态）"""
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"{SERVICE_NAME} is running on port {settings.port}")
        logger.info(f"Health check: http://localhost:{settings.port}/health")
        logger.info(f"Convert endpoint: POST http://localhost:{settings.port}/convert")
        yield
        logger.info(f"{SERVICE_NAME} stopped")

    # 创建 FastAPI 应用
    app = FastAPI(
        title=SERVICE_NAME,
        description="将上传的图片转换为 base64 编码的 RGBA PNG",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.upload_validator = UploadTypeValidator(
        settings.allowed_mime_types,
        settings.allowed_extensions,
    )

    # 错误处理与路由
    register_error_handlers(app)
    app.include_router(convert.router, tags=["图片转换"])

    @app.get("/health")
    async def health_check():
        """健康检查"""
        return {"status": "OK", "service": SERVICE_NAME}

    return app


class ImageConverterServer:
    """绑定单个应用实例的 uvicorn 服务。"""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings.from_env()
        self.app = create_app(self.settings)
        config = uvicorn.Config(
            self.app,
            host=self.settings.host,
            port=self.settings.port,
            log_level=self.settings.log_level.lower(),
        )
        self._server = uvicorn.Server(config)

    @property
    def started(self) -> bool:
        return self._server.started

    @property
    def bound_port(self) -> Optional[int]:
        """实际监听端口（port=0 时由系统分配），未启动时为 None"""
        for server in getattr(self._server, "servers", []):
            for sock in server.sockets:
                return sock.getsockname()[1]
        return None

    def run(self) -> None:
        """阻塞运行，直到被中断"""
        self._server.run()

    async def serve(self) -> None:
        await self._server.serve()

    def shutdown(self) -> None:
        """通知运行中的服务处理完在途请求后退出"""
        self._server.should_exit = True


def main() -> None:
    ImageConverterServer().run()


if __name__ == "__main__":
    main()
