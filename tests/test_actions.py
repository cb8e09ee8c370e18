import pytest

from coding_agent.actions import (
    ChatAction,
    ParseFailure,
    ReadAction,
    RollbackAction,
    RunAction,
    WriteAction,
    describe,
    ensure_complete,
    parse_action,
    parse_reply,
)
from coding_agent.errors import MalformedAction


class TestParseReply:

    def test_empty_reply(self):
        parsed = parse_reply("   ", "hello")
        assert not parsed.ok
        assert parsed.failure is ParseFailure.EMPTY_REPLY

    def test_none_reply(self):
        assert parse_reply(None, "hello").failure is ParseFailure.EMPTY_REPLY

    def test_invalid_json(self):
        parsed = parse_reply("Sure! I will read the file.", "hello")
        assert parsed.failure is ParseFailure.INVALID_JSON

    def test_json_array_is_not_an_action(self):
        assert parse_reply("[1, 2]", "hello").failure is ParseFailure.NOT_AN_OBJECT

    def test_code_fence_is_stripped(self):
        parsed = parse_reply('```json\n{"type": "run", "command": "ls -la"}\n```', "list files")
        assert parsed.ok
        assert parsed.action == RunAction(command="ls -la")

    def test_kind_and_type_are_aliases(self):
        assert parse_reply('{"kind": "read", "target": "a.txt"}', "x").action == ReadAction(target="a.txt")
        assert parse_reply('{"type": "read", "target": "a.txt"}', "x").action == ReadAction(target="a.txt")


class TestParseAction:

    def test_missing_kind(self):
        parsed = parse_action({"target": "a.txt"}, "x")
        assert parsed.failure is ParseFailure.MISSING_KIND

    def test_unknown_kind(self):
        parsed = parse_action({"type": "delete", "target": "a.txt"}, "x")
        assert parsed.failure is ParseFailure.UNKNOWN_KIND
        assert "delete" in parsed.detail

    def test_write_requires_target_and_content(self):
        parsed = parse_action({"type": "write", "target": "a.txt"}, "x")
        assert parsed.failure is ParseFailure.MISSING_FIELDS
        assert parsed.detail == "write action requires content"

    def test_write_with_empty_content_is_allowed(self):
        parsed = parse_action({"type": "write", "target": "a.txt", "content": ""}, "x")
        assert parsed.action == WriteAction(target="a.txt", content="")

    def test_blank_command_is_missing(self):
        parsed = parse_action({"type": "run", "command": "  "}, "x")
        assert parsed.failure is ParseFailure.MISSING_FIELDS

    def test_chat_message_defaults_to_instruction(self):
        parsed = parse_action({"type": "chat", "reasoning": "question"}, "what is a closure?")
        assert parsed.action == ChatAction(message="what is a closure?", reasoning="question")

    def test_rollback_needs_nothing(self):
        assert parse_action({"type": "rollback"}, "undo").action == RollbackAction()

    def test_unknown_keys_are_ignored(self):
        parsed = parse_action({"type": "read", "target": "a.txt", "confidence": 0.9, "extra": [1]}, "x")
        assert parsed.action == ReadAction(target="a.txt")

    def test_kind_is_case_insensitive(self):
        assert parse_action({"type": "READ", "target": "a.txt"}, "x").action.kind == "read"


class TestEnsureComplete:

    def test_complete_action_passes(self):
        ensure_complete(WriteAction(target="a.txt", content="hi"))

    def test_constructed_without_required_field(self):
        action = WriteAction.model_construct(target="a.txt")
        with pytest.raises(MalformedAction, match="content"):
            ensure_complete(action)


def test_describe():
    assert describe(ReadAction(target="a.txt")) == "read(a.txt)"
    assert describe(RunAction(command="ls")) == "run(ls)"
    assert describe(RollbackAction()) == "rollback()"
