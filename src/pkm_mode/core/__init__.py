"""Core 模块 - 模式状态、日志记录、PKM 指令

- ModeState: PKM 模式运行时状态
- entries: 会话日志记录与最近状态回放
- prompts: 内置指令和 system prompt 注入
- Message: Agent 对话消息
"""

from pkm_mode.core.message import Message
from pkm_mode.core.prompts import (
    DEFAULT_PKM_PROMPT,
    DEFAULT_PROMPT_SOURCE,
    build_location_hint,
    inject_prompt,
)
from pkm_mode.core.state import ModeState
from pkm_mode.core.entries import (
    PKM_MODE_ENTRY,
    SessionEntry,
    latest_enabled,
    make_mode_entry,
)

__all__ = [
    "Message",
    "ModeState",
    "DEFAULT_PKM_PROMPT",
    "DEFAULT_PROMPT_SOURCE",
    "build_location_hint",
    "inject_prompt",
    "PKM_MODE_ENTRY",
    "SessionEntry",
    "latest_enabled",
    "make_mode_entry",
]
