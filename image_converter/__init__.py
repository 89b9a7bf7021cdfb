# Image Converter Library
# 共享 Python 库，用于上传校验与 RGBA PNG 转换

# 首先初始化环境（加载 .env）
from .env_init import PROJECT_ROOT

from .config import Settings
from .errors import (
    ConverterError,
    UploadError,
    MissingImageFile,
    UnsupportedFileType,
    FileTooLarge,
    ImageConversionError,
)
from .image_utils import ConversionResult, convert_image_bytes_to_png
from .upload_validator import UploadedImage, UploadTypeValidator

__all__ = [
    'PROJECT_ROOT', 'Settings',
    'ConverterError', 'UploadError', 'MissingImageFile', 'UnsupportedFileType', 'FileTooLarge',
    'ImageConversionError',
    'ConversionResult', 'convert_image_bytes_to_png',
    'UploadedImage', 'UploadTypeValidator',
]
