"""PKM Mode 控制器

用法（宿主加载插件后）:
    /pkm                  切换开关
    /pkm on | off         开启 / 关闭
    /pkm status           查看状态
    /pkm <任意文本>        开启并把文本作为新消息发送

启动参数:
    --pkm                 以 PKM 模式启动
    --pkm-prompt PATH     指定 prompt 文件

状态通过宿主的会话日志保存（customType="pkm-mode"），新会话开始时恢复。
"""

from typing import Any

from pkm_mode.config import Settings, settings
from pkm_mode.core.entries import latest_enabled, make_mode_entry
from pkm_mode.core.prompts import inject_prompt
from pkm_mode.core.state import ModeState
from pkm_mode.host import (
    BEFORE_AGENT_START,
    SESSION_START,
    BeforeAgentStartEvent,
    HostAPI,
    HostContext,
)
from pkm_mode.prompt.resolver import PromptResolver
from pkm_mode.prompt.settings_lookup import resolve_supplementary_path

COMMAND_NAME = "pkm"
FLAG_NAME = "pkm"
PROMPT_FLAG_NAME = "pkm-prompt"
STATUS_KEY = "pkm-mode"
STATUS_LABEL = "PKM"

ENABLE_WORDS = {"on", "enable", "enabled"}
DISABLE_WORDS = {"off", "disable", "disabled"}


class PkmModeController:
    """PKM 模式控制器

    宿主事件一次只派发一个，所以 state 只会被一个处理器修改。
    """

    def __init__(self, api: HostAPI, cfg: Settings | None = None):
        self.api = api
        self.settings = cfg or settings
        self.resolver = PromptResolver(self.settings)
        self.state = ModeState()

    def register(self) -> None:
        """向宿主注册 flag、命令和事件处理器"""
        self.api.register_flag(
            FLAG_NAME,
            description="Start in PKM mode",
            type="boolean",
            default=False,
        )
        self.api.register_flag(
            PROMPT_FLAG_NAME,
            description="Path to a file holding the PKM prompt",
            type="string",
            default=None,
        )
        self.api.register_command(
            COMMAND_NAME,
            description="Toggle PKM mode (or use: /pkm on|off|status)",
            handler=self.handle_command,
        )
        self.api.on(SESSION_START, self.on_session_start)
        self.api.on(BEFORE_AGENT_START, self.on_before_agent_start)

    # ---- 命令 ----

    async def handle_command(self, args: str, ctx: HostContext) -> None:
        """处理 /pkm 命令"""
        text = args.strip()
        normalized = text.lower()

        if normalized == "status":
            if ctx.has_ui:
                ctx.notify(f"PKM mode {self.state.label}. Prompt: {self.state.prompt_source}")
            self._update_status(ctx)
            return

        if normalized in ENABLE_WORDS:
            self.state.enabled = True
        elif normalized in DISABLE_WORDS:
            self.state.enabled = False
        elif normalized:
            # 开启后直接提问；已开启时也会重新记录一次
            self.state.enabled = True
            self._persist()
            self._update_status(ctx)
            if ctx.has_ui:
                ctx.notify(f"PKM mode enabled ({self.state.prompt_source})", "info")
            self.api.send_user_message(text)
            return
        else:
            self.state.enabled = not self.state.enabled

        self._persist()
        self._update_status(ctx)
        if ctx.has_ui:
            ctx.notify(self._describe(), "info")

    # ---- 事件 ----

    async def on_session_start(self, event: Any, ctx: HostContext) -> None:
        """新会话: 启动参数作为初始值，日志中的最近记录覆盖它"""
        if self.api.get_flag(FLAG_NAME) is True:
            self.state.enabled = True

        persisted = latest_enabled(ctx.get_entries())
        if persisted is not None:
            self.state.enabled = persisted

        self.refresh_prompt()
        self._update_status(ctx)

    async def on_before_agent_start(
        self, event: BeforeAgentStartEvent, ctx: HostContext
    ) -> dict[str, Any] | None:
        """模式开启时把 PKM 指令追加到 system prompt"""
        if not self.state.enabled:
            return None
        return {"system_prompt": inject_prompt(event.system_prompt, self.state)}

    # ---- 内部 ----

    def refresh_prompt(self) -> None:
        """重新解析 prompt 和知识库位置"""
        override = self.api.get_flag(PROMPT_FLAG_NAME)
        resolved = self.resolver.resolve(override if isinstance(override, str) else None)
        self.state.prompt_text = resolved.text
        self.state.prompt_source = resolved.source
        self.state.supplementary_path = resolve_supplementary_path(self.settings)

    def _persist(self) -> None:
        entry = make_mode_entry(self.state.enabled)
        self.api.append_entry(entry.custom_type, entry.data)

    def _update_status(self, ctx: HostContext) -> None:
        if not ctx.has_ui:
            return
        ctx.set_status(STATUS_KEY, STATUS_LABEL if self.state.enabled else None)

    def _describe(self) -> str:
        if self.state.enabled:
            return f"PKM mode enabled ({self.state.prompt_source})"
        return "PKM mode disabled"


def register(api: HostAPI, cfg: Settings | None = None) -> PkmModeController:
    """插件入口: 创建控制器并注册到宿主"""
    controller = PkmModeController(api, cfg)
    controller.register()
    return controller
