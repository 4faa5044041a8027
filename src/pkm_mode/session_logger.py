"""Session Logger - 会话历史记录器

记录每次会话的交互历史，包括：
- 用户输入和 /命令
- PKM 模式切换
- 发送给 LLM 的 system prompt
- LLM 的响应
- 错误
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any

from pkm_mode.config import Settings, get_pkm_home

# 日志子目录
LOG_SUBDIR = "logs"


class SessionLogger:
    """会话日志记录器"""

    def __init__(self, session_id: str, cfg: Settings | None = None):
        """初始化会话日志

        Args:
            session_id: 会话 ID，与 SessionStore 的文件名一致
            cfg: 配置，决定日志目录
        """
        self.session_id = session_id
        self.log_dir = get_pkm_home(cfg) / LOG_SUBDIR
        self.log_file = self.log_dir / f"session_{self.session_id}.log"
        self.turn_count = 0
        self.start_time = datetime.now()

        # 确保日志目录存在
        self.log_dir.mkdir(parents=True, exist_ok=True)

        # 写入会话开始标记
        self._write_header()

    def _write_header(self) -> None:
        """写入会话头部信息"""
        header = f"""{'=' * 80}
SESSION START: {self.start_time.strftime("%Y-%m-%d %H:%M:%S")}
SESSION ID: {self.session_id}
{'=' * 80}

"""
        self._append(header)

    def _append(self, content: str) -> None:
        """追加内容到日志文件"""
        with open(self.log_file, "a", encoding="utf-8") as f:
            f.write(content)

    def start_turn(self) -> int:
        """开始新一轮对话，返回轮次编号"""
        self.turn_count += 1
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")

        turn_header = f"""
{'=' * 80}
[TURN {self.turn_count}]
Timestamp: {timestamp}
{'=' * 80}

"""
        self._append(turn_header)
        return self.turn_count

    def log_user_input(self, user_input: str) -> None:
        """记录用户输入"""
        self._append(f"""--- USER INPUT ---
{user_input}

""")

    def log_command(self, name: str, args: str, handled: bool) -> None:
        """记录 /命令"""
        status = "HANDLED" if handled else "UNKNOWN"
        self._append(f"""--- COMMAND: /{name} [{status}] ---
Args: {args!r}

""")

    def log_entry(self, custom_type: str, data: Any) -> None:
        """记录写入会话日志的状态"""
        self._append(f"""--- ENTRY: {custom_type} ---
{json.dumps(data, ensure_ascii=False)}

""")

    def log_system_prompt(self, system_prompt: str) -> None:
        """记录 system prompt"""
        self._append(f"""--- SYSTEM PROMPT ---
{system_prompt}

""")

    def log_llm_response(self, text: str, stop_reason: str | None) -> None:
        """记录 LLM 响应"""
        self._append(f"""--- LLM RESPONSE [{stop_reason}] ---
{text}

""")

    def log_error(self, error: Exception) -> None:
        """记录错误信息"""
        self._append(f"""--- ERROR ---
Type: {type(error).__name__}
Message: {str(error)}

""")

    def close(self) -> None:
        """结束会话，写入尾部信息"""
        end_time = datetime.now()
        duration = end_time - self.start_time

        footer = f"""{'=' * 80}
SESSION END: {end_time.strftime("%Y-%m-%d %H:%M:%S")}
Duration: {duration}
Total Turns: {self.turn_count}
{'=' * 80}

Log file: {self.log_file}
"""
        self._append(footer)

    def __enter__(self) -> "SessionLogger":
        """上下文管理器入口"""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """上下文管理器出口，自动关闭"""
        self.close()
