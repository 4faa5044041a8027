"""知识库位置查找 - 读取 .pkm/settings.json

项目级 settings 优先于全局 settings；同一个文件里 pkmPath 优先于 pkm_path。
"""

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pkm_mode.config import Settings, get_settings_files, settings


class PkmSettingsFile(BaseModel):
    """settings.json 中 PKM 相关的字段，其余字段忽略"""

    model_config = ConfigDict(extra="ignore")

    pkm_path_camel: str | None = Field(default=None, alias="pkmPath")
    pkm_path: str | None = None

    @property
    def path(self) -> str | None:
        return self.pkm_path_camel or self.pkm_path or None


def load_settings_file(path: Path) -> PkmSettingsFile | None:
    """读取 settings 文件，任何失败都返回 None"""
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return PkmSettingsFile.model_validate(raw)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError):
        return None


def resolve_supplementary_path(cfg: Settings | None = None) -> str | None:
    """查找知识库位置

    按项目级 -> 全局的顺序，第一个给出路径值的 settings 文件胜出。
    相对路径以该文件所属范围的根目录为基准（项目根目录 / 用户 home）。

    Returns:
        知识库的绝对路径，未配置或路径不存在时返回 None
    """
    for settings_file, base_dir in get_settings_files(cfg or settings):
        loaded = load_settings_file(settings_file)
        if loaded is None or loaded.path is None:
            continue

        try:
            location = Path(loaded.path).expanduser()
            if not location.is_absolute():
                location = base_dir / location
            return str(location.resolve()) if location.exists() else None
        except (OSError, RuntimeError):
            return None

    return None
