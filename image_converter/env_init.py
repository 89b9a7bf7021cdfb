"""
环境初始化模块

定位项目根目录并加载 .env 文件。
"""

import os
from pathlib import Path

from dotenv import load_dotenv


def init_environment():
    """
    初始化项目环境

    1. 定位项目根目录
    2. 加载项目根目录下的 .env 文件（不存在时使用默认查找）
    """
    # 获取项目根目录（image_converter 的父目录）
    package_dir = Path(__file__).parent
    project_root = package_dir.parent

    # 加载 .env 文件
    env_path = project_root / '.env'
    if env_path.exists():
        load_dotenv(env_path)
    else:
        load_dotenv()

    return project_root


def read_int_env(name: str, default: int, minimum: int = 1) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    return max(minimum, value)


# 模块导入时自动初始化
PROJECT_ROOT = init_environment()
