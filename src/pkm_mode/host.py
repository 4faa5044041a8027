"""宿主接口 - 插件依赖的能力

插件不关心宿主是谁，只依赖这里定义的几个读写能力:
注册 flag / 命令 / 事件处理器、通知用户、读写会话日志、转发消息。
runtime.LocalHost 是一个进程内实现，测试中用内存实现替代。
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Literal, Protocol, runtime_checkable

from pkm_mode.core.entries import SessionEntry

# 宿主事件
SESSION_START = "session_start"
BEFORE_AGENT_START = "before_agent_start"

FlagType = Literal["boolean", "string"]
NotifyLevel = Literal["info", "warning", "error"]


@dataclass
class SessionStartEvent:
    """新会话开始"""

    session_id: str = ""


@dataclass
class BeforeAgentStartEvent:
    """构建 system prompt 时触发，处理器可以返回 {"system_prompt": ...} 替换它"""

    system_prompt: str


@runtime_checkable
class HostContext(Protocol):
    """事件/命令处理时的上下文"""

    @property
    def has_ui(self) -> bool: ...

    def notify(self, message: str, level: NotifyLevel = "info") -> None: ...

    def set_status(self, key: str, value: str | None) -> None: ...

    def get_entries(self) -> list[SessionEntry]: ...


CommandHandler = Callable[[str, HostContext], Awaitable[None]]
EventHandler = Callable[[Any, HostContext], Awaitable[dict[str, Any] | None]]


@runtime_checkable
class HostAPI(Protocol):
    """插件注册时拿到的宿主 API"""

    def register_flag(
        self,
        name: str,
        *,
        description: str,
        type: FlagType,
        default: Any = None,
    ) -> None: ...

    def register_command(self, name: str, *, description: str, handler: CommandHandler) -> None: ...

    def on(self, event: str, handler: EventHandler) -> None: ...

    def get_flag(self, name: str) -> Any: ...

    def append_entry(self, custom_type: str, data: Any) -> None: ...

    def send_user_message(self, text: str) -> None: ...
