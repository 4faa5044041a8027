"""pkm-mode - PKM 模式开关插件

开启后在 system prompt 后追加个人知识管理指令，状态保存在宿主的会话日志中。
"""

from pkm_mode.controller import PkmModeController, register
from pkm_mode.core.state import ModeState

__version__ = "0.1.0"

__all__ = ["PkmModeController", "ModeState", "register"]
