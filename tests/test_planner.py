import pytest

from coding_agent.actions import ChatAction, ReadAction, WriteAction
from coding_agent.errors import MalformedAction
from coding_agent.planner import IntentPlanner
from coding_agent.system_context import SystemContext

from .conftest import FakeLLM


@pytest.fixture
def make_planner(cfg, monkeypatch):
    monkeypatch.setattr(SystemContext, "_collect", lambda self: "# System Environment\nLinux")

    def make(*replies):
        llm = FakeLLM(*replies)
        return IntentPlanner(llm, SystemContext(cfg)), llm
    return make


class TestParseIntent:

    @pytest.mark.parametrize("reply", ["", "   \n", "I think you want to read the file", '["read"]'])
    def test_unusable_reply_falls_back_to_chat(self, make_planner, reply):
        planner, _ = make_planner(reply)
        action = planner.parse_intent("explain main.py", "No previous context")
        assert isinstance(action, ChatAction)
        assert action.message == "explain main.py"
        assert action.reasoning.startswith("Fallback to chat")

    def test_missing_kind_falls_back_to_chat(self, make_planner):
        planner, _ = make_planner('{"target": "main.py", "reasoning": "read it"}')
        action = planner.parse_intent("show me main.py", "No previous context")
        assert action == ChatAction(message="show me main.py", reasoning=action.reasoning)
        assert "missing_kind" in action.reasoning

    def test_valid_reply(self, make_planner):
        planner, llm = make_planner('{"type": "read", "target": "package.json", "reasoning": "asked to"}')
        action = planner.parse_intent("read package.json", "No previous context")
        assert action == ReadAction(target="package.json", reasoning="asked to")
        assert len(llm.calls) == 1

    def test_missing_required_field_is_malformed(self, make_planner):
        planner, _ = make_planner('{"type": "write", "target": "a.py"}')
        with pytest.raises(MalformedAction, match="content"):
            planner.parse_intent("write a.py", "No previous context")

    def test_prompt_carries_context_and_environment(self, make_planner):
        planner, llm = make_planner('{"type": "rollback"}')
        planner.parse_intent("undo", 'Instruction: "x" -> Action: read(a) -> Result: b')
        system, user = llm.calls[0]
        assert system["role"] == "system"
        assert 'Instruction: "x"' in system["content"]
        assert "# System Environment" in system["content"]
        assert user == {"role": "user", "content": "undo"}

    def test_write_reply(self, make_planner):
        planner, _ = make_planner('{"type": "write", "target": "a.py", "content": "print(1)\\n"}')
        assert planner.parse_intent("x", "") == WriteAction(target="a.py", content="print(1)\n")


class TestSystemContext:

    def test_described_once_per_planner(self, cfg, monkeypatch):
        calls = []

        def collect(self):
            calls.append(1)
            return "env"
        monkeypatch.setattr(SystemContext, "_collect", collect)
        llm = FakeLLM('{"type": "rollback"}', '{"type": "rollback"}')
        planner = IntentPlanner(llm, SystemContext(cfg))

        planner.parse_intent("undo", "")
        planner.parse_intent("undo again", "")

        assert len(calls) == 1
        assert llm.calls[0][0]["content"] == llm.calls[1][0]["content"]

    def test_real_description_lists_project_files(self, cfg):
        (cfg.project_root / "src").mkdir()
        (cfg.project_root / "src" / "app.py").write_text("")
        (cfg.project_root / "node_modules").mkdir()
        (cfg.project_root / "README.md").write_text("")

        text = SystemContext(cfg).describe()

        assert "src/" in text
        assert "  app.py" in text
        assert "README.md" in text
        assert "node_modules" not in text
        assert str(cfg.project_root) in text
