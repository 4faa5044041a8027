"""Session Store - 追加式会话日志

每个会话一个 JSONL 文件，存储在 $PKM_MODE_HOME/sessions/ 下。
文件名格式: {timestamp}-{id}.jsonl，时间戳精确到微秒，按文件名降序即最新在前。
"""

import json
import uuid
from datetime import datetime
from pathlib import Path

from pkm_mode.config import Settings, get_pkm_home
from pkm_mode.core.entries import SessionEntry

# 会话文件子目录
SESSION_SUBDIR = "sessions"


def get_session_dir(cfg: Settings | None = None) -> Path:
    """获取会话文件目录"""
    return get_pkm_home(cfg) / SESSION_SUBDIR


def list_sessions(cfg: Settings | None = None) -> list[Path]:
    """列出所有会话文件，最新的在前"""
    session_dir = get_session_dir(cfg)
    if not session_dir.exists():
        return []

    sessions = [f for f in session_dir.iterdir() if f.is_file() and f.suffix == ".jsonl"]
    sessions.sort(key=lambda p: p.name, reverse=True)
    return sessions


class SessionStore:
    """会话日志，只追加不修改"""

    def __init__(self, path: Path):
        self.path = path
        self.session_id = path.stem

    @classmethod
    def create(cls, cfg: Settings | None = None) -> "SessionStore":
        """新建会话"""
        timestamp = datetime.now().strftime("%Y%m%d-%H%M%S-%f")
        session_dir = get_session_dir(cfg)
        session_dir.mkdir(parents=True, exist_ok=True)
        return cls(session_dir / f"{timestamp}-{uuid.uuid4().hex[:8]}.jsonl")

    @classmethod
    def latest(cls, cfg: Settings | None = None) -> "SessionStore | None":
        """打开最近的会话，没有时返回 None"""
        sessions = list_sessions(cfg)
        if not sessions:
            return None
        return cls(sessions[0])

    def append(self, entry: SessionEntry) -> None:
        """追加一条记录"""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry.to_dict(), ensure_ascii=False) + "\n")

    def get_entries(self) -> list[SessionEntry]:
        """读取全部记录（旧 -> 新），格式错误的行跳过"""
        try:
            lines = self.path.read_text(encoding="utf-8").splitlines()
        except FileNotFoundError:
            return []

        entries = []
        for line in lines:
            if not line.strip():
                continue
            try:
                record = json.loads(line)
                if isinstance(record, dict):
                    entries.append(SessionEntry.from_dict(record))
            except (json.JSONDecodeError, ValueError, TypeError):
                continue
        return entries
