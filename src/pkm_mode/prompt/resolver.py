"""PKM Prompt 解析

策略由 Settings.prompt_policy 决定:
- builtin: 总是使用内置文本
- files: 按顺序查找候选文件，第一个能读到内容的文件胜出

候选文件:
- .md / .txt: 整个文件内容
- 其他（.py / .ts 等源码）: 提取引号包裹的文本块，
  变量名带 pkm / prompt 的块优先于第一个找到的块

任何读取失败都跳到下一个候选，全部失败时回退到内置文本。解析不会抛异常。
"""

import re
import textwrap
from dataclasses import dataclass
from pathlib import Path

from pkm_mode.config import Settings, get_prompt_candidates, settings
from pkm_mode.core.prompts import DEFAULT_PKM_PROMPT, DEFAULT_PROMPT_SOURCE

# 直接作为 prompt 使用的纯文本文件
PLAIN_TEXT_SUFFIXES = {".md", ".markdown", ".txt"}

# 变量名提示，按优先级排序
PROMPT_NAME_HINTS = ("pkm", "prompt")

# NAME = """...""" / NAME: str = '''...''' / const NAME = `...`
_QUOTED_BLOCK = re.compile(
    r"(?:(?P<name>[A-Za-z_]\w*)\s*(?::[^=\n]*)?=\s*)?"
    r"(?P<quote>\"\"\"|'''|`)"
    r"(?P<body>.*?)"
    r"(?P=quote)",
    re.DOTALL,
)


@dataclass
class ResolvedPrompt:
    """解析结果"""

    text: str
    source: str


def extract_quoted_block(content: str, hints: tuple[str, ...] = PROMPT_NAME_HINTS) -> str | None:
    """从源码中提取引号包裹的文本块

    Args:
        content: 文件内容
        hints: 变量名提示，按优先级排序

    Returns:
        去缩进后的文本块，找不到时返回 None
    """
    blocks: list[tuple[str, str]] = []
    for match in _QUOTED_BLOCK.finditer(content):
        body = textwrap.dedent(match.group("body")).strip()
        if body:
            blocks.append(((match.group("name") or "").lower(), body))

    if not blocks:
        return None

    for hint in hints:
        for name, body in blocks:
            if hint in name:
                return body

    return blocks[0][1]


def read_prompt_file(path: Path) -> str | None:
    """读取单个候选文件

    Returns:
        prompt 文本，文件不存在、无法读取或没有内容时返回 None
    """
    try:
        if not path.is_file():
            return None
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None

    if path.suffix.lower() in PLAIN_TEXT_SUFFIXES:
        text = content.strip()
        return text or None

    return extract_quoted_block(content)


class PromptResolver:
    """PKM Prompt 解析器"""

    def __init__(self, cfg: Settings | None = None):
        self.settings = cfg or settings

    def candidates(self, override: str | None = None) -> list[Path]:
        """候选文件列表，override 路径排在最前

        无法展开的路径（例如不存在的 ~user）直接跳过
        """
        try:
            paths = get_prompt_candidates(self.settings)
        except RuntimeError:
            paths = []
        if override:
            try:
                paths.insert(0, Path(override).expanduser())
            except RuntimeError:
                pass
        return paths

    def resolve(self, override: str | None = None) -> ResolvedPrompt:
        """解析 prompt

        Args:
            override: 启动参数 --pkm-prompt 指定的路径

        Returns:
            解析结果，始终有非空文本
        """
        if self.settings.prompt_policy == "files":
            for path in self.candidates(override):
                text = read_prompt_file(path)
                if text:
                    return ResolvedPrompt(text=text, source=str(path))

        return ResolvedPrompt(text=DEFAULT_PKM_PROMPT, source=DEFAULT_PROMPT_SOURCE)
