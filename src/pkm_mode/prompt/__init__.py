"""Prompt 解析 - PKM 指令来源和知识库位置"""

from pkm_mode.prompt.resolver import PromptResolver, ResolvedPrompt, extract_quoted_block
from pkm_mode.prompt.settings_lookup import resolve_supplementary_path

__all__ = ["PromptResolver", "ResolvedPrompt", "extract_quoted_block", "resolve_supplementary_path"]
