"""PKM 模式状态"""

from dataclasses import dataclass

from pkm_mode.core.prompts import DEFAULT_PKM_PROMPT, DEFAULT_PROMPT_SOURCE


@dataclass
class ModeState:
    """PKM 模式运行时状态

    在插件注册时创建，仅由命令处理和 session_start 修改，
    生命周期与宿主进程相同。

    Attributes:
        enabled: 模式是否开启，始终为确定的 bool
        prompt_text: 注入的指令文本，不能为空
        prompt_source: prompt 来源标签（"builtin-default" 或文件路径）
        supplementary_path: 知识库位置，未解析到时为 None
    """

    enabled: bool = False
    prompt_text: str = DEFAULT_PKM_PROMPT
    prompt_source: str = DEFAULT_PROMPT_SOURCE
    supplementary_path: str | None = None

    @property
    def label(self) -> str:
        return "enabled" if self.enabled else "disabled"
