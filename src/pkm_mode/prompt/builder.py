"""基础 System Prompt 构建器

PKM 指令不在这里，由插件在 before_agent_start 时追加。
"""

import os
import sys
from datetime import datetime
from pathlib import Path


# Provider 层 - Claude 模板
PROVIDER_TEMPLATE = """You are a helpful assistant powered by Claude, running in an interactive terminal.

## Guidelines

1. Think step by step before answering
2. Ask clarifying questions when the request is ambiguous
3. Keep answers concise
"""


def _build_environment_layer() -> str:
    """环境信息"""
    lines = [
        "<env>",
        f"  Working directory: {os.getcwd()}",
        f"  Platform: {sys.platform}",
        f"  Today's date: {datetime.now().strftime('%Y-%m-%d')}",
        "</env>",
    ]
    return "\n".join(lines)


def _build_custom_layer() -> str | None:
    """加载项目规则文件 (AGENTS.md 等)"""
    current = Path(os.getcwd()).resolve()

    for filename in ["AGENTS.md", "CLAUDE.md"]:
        for parent in [current, *current.parents]:
            rule_file = parent / filename
            if rule_file.exists():
                try:
                    content = rule_file.read_text(encoding="utf-8").strip()
                    return f"## Project Rules (from {filename})\n\n{content}\n"
                except (OSError, UnicodeDecodeError):
                    return None
    return None


class PromptBuilder:
    """基础 System Prompt 构建器"""

    async def build(self) -> str:
        """构建基础 System Prompt"""
        layers = [
            PROVIDER_TEMPLATE,
            _build_environment_layer(),
            _build_custom_layer(),  # 可能为 None
        ]
        return "\n\n".join([layer for layer in layers if layer])
