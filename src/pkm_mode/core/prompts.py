"""PKM 指令文本 - 模式开启时追加到 system prompt

注入是纯函数：同一个 state 对同一个输入总是得到同样的输出。
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pkm_mode.core.state import ModeState

# 内置 PKM 指令，没有外部来源时使用
DEFAULT_PKM_PROMPT = """You are an expert personal knowledge manager.
Your goal is to help me organize my thoughts, ideas, and knowledge into a structured set of files.
You will be creating and editing markdown files.
When I share ideas with you, you should help me clarify them and then save them to the appropriate files.
You can ask me questions to better understand where to save the information or how to structure it.
Focus on creating a well-organized and easy-to-navigate knowledge base.
Do not write code unless I explicitly ask you to."""

DEFAULT_PROMPT_SOURCE = "builtin-default"

SECTION_SEPARATOR = "\n\n"


def build_location_hint(path: str) -> str:
    """知识库位置提示"""
    return f"The knowledge base is stored in {path}. Read and write notes there."


def inject_prompt(system_prompt: str, state: "ModeState") -> str:
    """把 PKM 指令追加到 system prompt 之后

    Args:
        system_prompt: 宿主构建的 system prompt
        state: 当前模式状态

    Returns:
        模式关闭时原样返回；开启时追加指令（以及知识库位置提示）
    """
    if not state.enabled:
        return system_prompt

    sections = [system_prompt, state.prompt_text]
    if state.supplementary_path:
        sections.append(build_location_hint(state.supplementary_path))
    return SECTION_SEPARATOR.join(sections)
