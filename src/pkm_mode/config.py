"""配置管理"""

import os
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings

# 默认 PKM 目录名
DEFAULT_PKM_DIR = ".pkm"


class Settings(BaseSettings):
    """应用配置"""

    # Anthropic API
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-3-5-sonnet-20241022"
    anthropic_max_tokens: int = 4096

    # 应用
    working_dir: Path = Path.cwd()
    debug: bool = False

    # Prompt 解析策略: builtin 只用内置文本, files 按候选文件顺序查找
    prompt_policy: Literal["builtin", "files"] = "files"
    # 额外的候选 prompt 文件，为空时使用默认列表
    prompt_files: list[Path] = []

    # settings.json 路径，为 None 时使用默认位置
    project_settings_file: Path | None = None
    global_settings_file: Path | None = None

    class Config:
        env_file = ".env"
        env_prefix = "PKM_MODE_"


# 全局配置实例
settings = Settings()


def get_api_key() -> str:
    """获取 API Key，优先级: 环境变量 > .env 文件"""
    key = settings.anthropic_api_key or os.getenv("ANTHROPIC_API_KEY", "")
    if not key:
        raise ValueError(
            "未找到 Anthropic API Key.\n"
            "请设置环境变量: export PKM_MODE_ANTHROPIC_API_KEY='your-key'\n"
            "或创建 .env 文件: echo 'PKM_MODE_ANTHROPIC_API_KEY=your-key' > .env"
        )
    return key


def get_pkm_home(cfg: Settings | None = None) -> Path:
    """获取 PKM Home 目录

    优先级:
    1. PKM_MODE_HOME 环境变量
    2. 工作目录下的 .pkm/

    Returns:
        PKM Home 目录路径
    """
    if pkm_home := os.getenv("PKM_MODE_HOME"):
        return Path(pkm_home).expanduser().resolve()
    return (cfg or settings).working_dir / DEFAULT_PKM_DIR


def get_prompt_candidates(cfg: Settings | None = None) -> list[Path]:
    """默认的 prompt 候选文件列表（按优先级排序）"""
    cfg = cfg or settings
    if cfg.prompt_files:
        return list(cfg.prompt_files)
    return [
        cfg.working_dir / DEFAULT_PKM_DIR / "prompt.md",
        get_pkm_home(cfg) / "prompt.md",
        cfg.working_dir / "pkm_prompt.py",
    ]


def get_settings_files(cfg: Settings | None = None) -> list[tuple[Path, Path]]:
    """settings.json 查找顺序

    Returns:
        [(settings 文件, 相对路径的基准目录), ...]，项目级在前，全局在后
    """
    cfg = cfg or settings
    project_file = cfg.project_settings_file or cfg.working_dir / DEFAULT_PKM_DIR / "settings.json"
    global_file = cfg.global_settings_file or Path.home() / DEFAULT_PKM_DIR / "settings.json"
    return [
        (project_file, cfg.working_dir),
        (global_file, Path.home()),
    ]
