"""LocalHost - 进程内宿主实现

实现 host.HostAPI 和 host.HostContext，供命令行使用:
- flag 值来自命令行参数
- 会话日志写入 SessionStore（JSONL）
- 通知和状态栏通过 rich 输出
- send_user_message 的消息进入 pending 队列，由 Agent 循环取出
"""

from dataclasses import dataclass
from typing import Any

from rich.console import Console

from pkm_mode.core.entries import SessionEntry
from pkm_mode.host import (
    BEFORE_AGENT_START,
    SESSION_START,
    BeforeAgentStartEvent,
    CommandHandler,
    EventHandler,
    FlagType,
    NotifyLevel,
    SessionStartEvent,
)
from pkm_mode.session_logger import SessionLogger
from pkm_mode.session_store import SessionStore

console = Console()

NOTIFY_STYLES = {
    "info": "cyan",
    "warning": "yellow",
    "error": "red",
}


@dataclass
class FlagSpec:
    """已注册的 flag"""

    name: str
    description: str
    type: FlagType
    default: Any = None


@dataclass
class CommandSpec:
    """已注册的命令"""

    name: str
    description: str
    handler: CommandHandler


class LocalHost:
    """进程内宿主"""

    def __init__(
        self,
        store: SessionStore,
        flags: dict[str, Any] | None = None,
        logger: SessionLogger | None = None,
        has_ui: bool = True,
    ):
        """初始化宿主

        Args:
            store: 当前会话的日志
            flags: 命令行传入的 flag 值 {name: value}
            logger: 会话文本日志，可选
            has_ui: 是否输出通知和状态栏
        """
        self.store = store
        self.logger = logger
        self._has_ui = has_ui
        self._flag_values = dict(flags or {})
        self._flags: dict[str, FlagSpec] = {}
        self._commands: dict[str, CommandSpec] = {}
        self._handlers: dict[str, list[EventHandler]] = {}
        self.statuses: dict[str, str] = {}
        self.pending_messages: list[str] = []

    # ---- HostContext ----

    @property
    def has_ui(self) -> bool:
        return self._has_ui

    def notify(self, message: str, level: NotifyLevel = "info") -> None:
        """输出通知"""
        if not self._has_ui:
            return
        style = NOTIFY_STYLES.get(level, "cyan")
        console.print(f"[{style}]{message}[/{style}]")

    def set_status(self, key: str, value: str | None) -> None:
        """设置或清除状态栏条目"""
        if value is None:
            self.statuses.pop(key, None)
        else:
            self.statuses[key] = value

    def get_entries(self) -> list[SessionEntry]:
        return self.store.get_entries()

    # ---- HostAPI ----

    def register_flag(
        self,
        name: str,
        *,
        description: str,
        type: FlagType,
        default: Any = None,
    ) -> None:
        """注册 flag

        Raises:
            ValueError: flag 已注册，或命令行传入的值类型不匹配
        """
        if name in self._flags:
            raise ValueError(f"Flag already registered: {name}")
        if name in self._flag_values:
            value = self._flag_values[name]
            expected = bool if type == "boolean" else str
            if value is not None and not isinstance(value, expected):
                raise ValueError(f"Flag --{name} expects a {type} value, got {value!r}")
        self._flags[name] = FlagSpec(name=name, description=description, type=type, default=default)

    def get_flag(self, name: str) -> Any:
        """读取 flag 值，未在命令行出现时返回默认值

        Raises:
            ValueError: flag 未注册
        """
        if name not in self._flags:
            available = ", ".join(self._flags.keys())
            raise ValueError(f"Unknown flag: {name}. Available: {available}")
        spec = self._flags[name]
        value = self._flag_values.get(name)
        return spec.default if value is None else value

    def register_command(self, name: str, *, description: str, handler: CommandHandler) -> None:
        """注册 /命令

        Raises:
            ValueError: 命令已注册
        """
        if name in self._commands:
            raise ValueError(f"Command already registered: /{name}")
        self._commands[name] = CommandSpec(name=name, description=description, handler=handler)

    def on(self, event: str, handler: EventHandler) -> None:
        """注册事件处理器"""
        self._handlers.setdefault(event, []).append(handler)

    def append_entry(self, custom_type: str, data: Any) -> None:
        """追加 custom 记录到会话日志"""
        self.store.append(SessionEntry.custom(custom_type, data))
        if self.logger:
            self.logger.log_entry(custom_type, data)

    def send_user_message(self, text: str) -> None:
        """转发一条用户消息给 Agent"""
        self.pending_messages.append(text)

    # ---- 派发 ----

    def list_commands(self) -> list[CommandSpec]:
        return list(self._commands.values())

    def status_line(self) -> str:
        """状态栏文本"""
        return " ".join(self.statuses.values())

    async def dispatch(self, line: str) -> bool:
        """派发 /命令

        Args:
            line: 用户输入，例如 "/pkm on"

        Returns:
            是否由已注册的命令处理
        """
        if not line.startswith("/"):
            return False

        name, _, args = line[1:].partition(" ")
        command = self._commands.get(name)
        if self.logger:
            self.logger.log_command(name, args, handled=command is not None)
        if command is None:
            self.notify(f"Unknown command: /{name}", "warning")
            return False

        await command.handler(args, self)
        return True

    async def start_session(self) -> None:
        """触发 session_start"""
        event = SessionStartEvent(session_id=self.store.session_id)
        for handler in self._handlers.get(SESSION_START, []):
            await handler(event, self)

    async def build_system_prompt(self, base_prompt: str) -> str:
        """触发 before_agent_start，依次应用处理器返回的 system prompt"""
        system_prompt = base_prompt
        for handler in self._handlers.get(BEFORE_AGENT_START, []):
            result = await handler(BeforeAgentStartEvent(system_prompt=system_prompt), self)
            if result and "system_prompt" in result:
                system_prompt = result["system_prompt"]
        return system_prompt

    def drain_messages(self) -> list[str]:
        """取出并清空待转发的消息"""
        messages = self.pending_messages
        self.pending_messages = []
        return messages
