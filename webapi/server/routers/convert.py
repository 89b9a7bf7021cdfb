"""
图片转换路由

接收单个上传图片，返回 base64 编码的 RGBA PNG
"""

import asyncio

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from image_converter.config import Settings
from image_converter.image_utils import (
    OUTPUT_COLOR_SPACE,
    OUTPUT_MIME_TYPE,
    convert_image_bytes_to_png,
)
from image_converter.logging_config import get_logger
from image_converter.multipart_reader import MultipartImageReader
from image_converter.upload_validator import UploadedImage

router = APIRouter()
logger = get_logger("convert")

CONVERSION_NOTE = "Output format is RGBA PNG, compatible with OpenAI Vision API"


class ConvertResponse(BaseModel):
    """转换成功的响应体（字段以 camelCase 输出）"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    original_format: str
    converted_format: str = OUTPUT_MIME_TYPE
    color_space: str = OUTPUT_COLOR_SPACE
    original_size: int
    converted_size: int
    base64: str
    note: str = CONVERSION_NOTE


async def read_image_upload(request: Request) -> UploadedImage:
    """解析 multipart 请求体，并执行大小与类型检查"""
    settings: Settings = request.app.state.settings
    reader = MultipartImageReader(
        field_name=settings.field_name,
        max_file_size=settings.max_file_size,
        validator=request.app.state.upload_validator,
    )
    return await reader.read(request.headers.get("content-type"), request.stream())


@router.post("/convert", response_model=ConvertResponse)
async def convert_image(upload: UploadedImage = Depends(read_image_upload)):
    """
    将上传图片转换为 RGBA PNG

    解码在工作线程中执行；编解码失败以 ImageConversionError 抛出，
    由全局错误处理统一返回。
    """
    logger.info(f"Converting image: {upload.filename} ({upload.content_type})")

    result = await asyncio.to_thread(convert_image_bytes_to_png, upload.content)

    logger.info(
        f"Converted {upload.filename}: {result.width}x{result.height} "
        f"{result.source_mode} -> {OUTPUT_COLOR_SPACE}, {upload.size} -> {result.size} bytes"
    )

    return ConvertResponse(
        original_format=upload.content_type,
        original_size=upload.size,
        converted_size=result.size,
        base64=result.to_base64(),
    )
