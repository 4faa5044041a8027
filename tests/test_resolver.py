"""Prompt 解析测试"""

from pathlib import Path

from pkm_mode.core.prompts import DEFAULT_PKM_PROMPT, DEFAULT_PROMPT_SOURCE
from pkm_mode.prompt.resolver import PromptResolver, extract_quoted_block, read_prompt_file

# 不存在的用户，~user 无法展开
UNKNOWN_USER_PATH = "~pkm_mode_no_such_user_zz/prompt.md"


class TestExtractQuotedBlock:
    """引号文本块提取测试"""

    def test_prefers_named_block_over_first_found(self):
        """测试变量名带提示的块优先于第一个块"""
        content = '''"""Module docstring."""

OTHER = """not this one"""

PKM_PROMPT = """
    You manage my notes.
    Keep them tidy.
"""
'''
        assert extract_quoted_block(content) == "You manage my notes.\nKeep them tidy."

    def test_pkm_hint_ranks_above_prompt_hint(self):
        """测试 pkm 提示优先于 prompt 提示"""
        content = 'SYSTEM_PROMPT = """generic"""\nMY_PKM_TEXT = """specific"""\n'
        assert extract_quoted_block(content) == "specific"

    def test_falls_back_to_first_block(self):
        """测试没有匹配的变量名时使用第一个块"""
        content = "intro = '''first block'''\nother = '''second block'''\n"
        assert extract_quoted_block(content) == "first block"

    def test_typescript_template_literal(self):
        """测试提取 TypeScript 模板字符串"""
        content = (
            'import type { API } from "host";\n\n'
            "const DEFAULT_PI_PKM_PROMPT = `You are an expert personal knowledge manager.\n"
            "Do not write code unless I explicitly ask you to.`;\n"
        )
        assert extract_quoted_block(content) == (
            "You are an expert personal knowledge manager.\n"
            "Do not write code unless I explicitly ask you to."
        )

    def test_annotated_assignment(self):
        """测试带类型注解的赋值"""
        content = 'PROMPT: str = """annotated"""\n'
        assert extract_quoted_block(content) == "annotated"

    def test_no_blocks(self):
        """测试没有文本块时返回 None"""
        assert extract_quoted_block("x = 1\ny = 'short'\n") is None

    def test_empty_blocks_ignored(self):
        """测试忽略空白文本块"""
        assert extract_quoted_block('PKM_PROMPT = """   """\n') is None


class TestReadPromptFile:
    """单个候选文件读取测试"""

    def test_markdown_uses_whole_file(self, tmp_path):
        """测试 markdown 文件使用全部内容"""
        path = tmp_path / "prompt.md"
        path.write_text("\n# Notes mode\n\nBe tidy.\n", encoding="utf-8")
        assert read_prompt_file(path) == "# Notes mode\n\nBe tidy."

    def test_missing_file(self, tmp_path):
        """测试文件不存在返回 None"""
        assert read_prompt_file(tmp_path / "missing.md") is None

    def test_directory_is_skipped(self, tmp_path):
        """测试目录被跳过"""
        assert read_prompt_file(tmp_path) is None

    def test_undecodable_file(self, tmp_path):
        """测试无法解码的文件返回 None"""
        path = tmp_path / "prompt.txt"
        path.write_bytes(b"\xff\xfe\x00\x80")
        assert read_prompt_file(path) is None

    def test_empty_markdown(self, tmp_path):
        """测试空文件返回 None"""
        path = tmp_path / "prompt.md"
        path.write_text("  \n", encoding="utf-8")
        assert read_prompt_file(path) is None


class TestPromptResolver:
    """PromptResolver 测试类"""

    def test_fallback_to_default(self, isolated_settings):
        """测试没有候选文件时回退到内置文本"""
        resolved = PromptResolver(isolated_settings).resolve()

        assert resolved.text == DEFAULT_PKM_PROMPT
        assert resolved.source == DEFAULT_PROMPT_SOURCE

    def test_project_prompt_file(self, isolated_settings):
        """测试读取项目级 prompt 文件"""
        prompt_file = isolated_settings.working_dir / ".pkm" / "prompt.md"
        prompt_file.parent.mkdir()
        prompt_file.write_text("Project prompt", encoding="utf-8")

        resolved = PromptResolver(isolated_settings).resolve()

        assert resolved.text == "Project prompt"
        assert resolved.source == str(prompt_file)

    def test_override_comes_first(self, isolated_settings, tmp_path):
        """测试 --pkm-prompt 路径优先"""
        (isolated_settings.working_dir / ".pkm").mkdir()
        (isolated_settings.working_dir / ".pkm" / "prompt.md").write_text("Project prompt", encoding="utf-8")
        override = tmp_path / "custom.py"
        override.write_text('PKM_PROMPT = """Override prompt"""\n', encoding="utf-8")

        resolved = PromptResolver(isolated_settings).resolve(str(override))

        assert resolved.text == "Override prompt"
        assert resolved.source == str(override)

    def test_unusable_candidates_fall_through(self, isolated_settings, tmp_path):
        """测试无法使用的候选文件依次跳过"""
        broken = tmp_path / "broken.md"
        broken.write_bytes(b"\xff\xfe\x00\x80")
        source_without_block = tmp_path / "empty.py"
        source_without_block.write_text("x = 1\n", encoding="utf-8")
        good = tmp_path / "good.txt"
        good.write_text("Good prompt", encoding="utf-8")
        cfg = isolated_settings.model_copy(update={"prompt_files": [broken, source_without_block, good]})

        resolved = PromptResolver(cfg).resolve(str(tmp_path / "missing.md"))

        assert resolved.text == "Good prompt"
        assert resolved.source == str(good)

    def test_unexpandable_override_is_skipped(self, isolated_settings):
        """测试无法展开的 ~user 路径被跳过，不抛异常"""
        prompt_file = isolated_settings.working_dir / ".pkm" / "prompt.md"
        prompt_file.parent.mkdir()
        prompt_file.write_text("Project prompt", encoding="utf-8")

        resolved = PromptResolver(isolated_settings).resolve(UNKNOWN_USER_PATH)

        assert resolved.text == "Project prompt"

    def test_unexpandable_override_falls_back_to_default(self, isolated_settings):
        """测试只有无法展开的路径时回退到内置文本"""
        resolved = PromptResolver(isolated_settings).resolve(UNKNOWN_USER_PATH)

        assert resolved.text == DEFAULT_PKM_PROMPT
        assert resolved.source == DEFAULT_PROMPT_SOURCE

    def test_builtin_policy_ignores_files(self, isolated_settings, tmp_path):
        """测试 builtin 策略忽略所有文件"""
        override = tmp_path / "custom.md"
        override.write_text("Override prompt", encoding="utf-8")
        cfg = isolated_settings.model_copy(update={"prompt_policy": "builtin"})

        resolved = PromptResolver(cfg).resolve(str(override))

        assert resolved.source == DEFAULT_PROMPT_SOURCE

    def test_idempotent(self, isolated_settings):
        """测试重复解析结果一致"""
        resolver = PromptResolver(isolated_settings)
        assert resolver.resolve() == resolver.resolve()

    def test_candidates_order(self, isolated_settings):
        """测试候选文件顺序"""
        candidates = PromptResolver(isolated_settings).candidates("~/prompt.md")

        assert candidates[0] == Path("~/prompt.md").expanduser()
        assert candidates[1] == isolated_settings.working_dir / ".pkm" / "prompt.md"
        assert candidates[-1] == isolated_settings.working_dir / "pkm_prompt.py"

    def test_default_candidates_not_mutated(self, isolated_settings):
        """测试 override 不污染默认候选列表"""
        resolver = PromptResolver(isolated_settings)
        resolver.candidates("/tmp/a.md")
        assert Path("/tmp/a.md") not in resolver.candidates()
