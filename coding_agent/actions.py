"""
Action model shared by the planners and the executor.

An action is one of five kinds, each with its own required fields.  Model
replies are turned into actions by :func:`parse_reply` / :func:`parse_action`,
which never raise for a bad reply: they return an :class:`ActionParse` that
either holds the action or says why there is none.
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field

from .errors import MalformedAction
from .utils import load_json

KINDS = ("read", "write", "run", "rollback", "chat")

REQUIRED_FIELDS: dict[str, tuple[str, ...]] = {
    "read": ("target",),
    "write": ("target", "content"),
    "run": ("command",),
    "rollback": (),
    "chat": ("message",),
}

# write content may legitimately be empty; every other required field may not
_MAY_BE_EMPTY = {"content"}


class ReadAction(BaseModel):
    kind: Literal["read"] = "read"
    target: str
    reasoning: Optional[str] = None


class WriteAction(BaseModel):
    kind: Literal["write"] = "write"
    target: str
    content: str
    reasoning: Optional[str] = None


class RunAction(BaseModel):
    kind: Literal["run"] = "run"
    command: str
    reasoning: Optional[str] = None


class RollbackAction(BaseModel):
    kind: Literal["rollback"] = "rollback"
    reasoning: Optional[str] = None


class ChatAction(BaseModel):
    kind: Literal["chat"] = "chat"
    message: str
    reasoning: Optional[str] = None


Action = Annotated[
    Union[ReadAction, WriteAction, RunAction, RollbackAction, ChatAction],
    Field(discriminator="kind"),
]

_MODELS = {
    "read": ReadAction,
    "write": WriteAction,
    "run": RunAction,
    "rollback": RollbackAction,
    "chat": ChatAction,
}


class ParseFailure(str, Enum):
    EMPTY_REPLY = "empty_reply"
    INVALID_JSON = "invalid_json"
    NOT_AN_OBJECT = "not_an_object"
    MISSING_KIND = "missing_kind"
    UNKNOWN_KIND = "unknown_kind"
    MISSING_FIELDS = "missing_fields"


@dataclass
class ActionParse:
    action: Optional[Action] = None
    failure: Optional[ParseFailure] = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.action is not None


def describe(action: Action) -> str:
    """Short ``kind(target-or-command)`` label used in logs and memory."""
    arg = getattr(action, "target", None) or getattr(action, "command", None) or ""
    return f"{action.kind}({arg})"


def _missing(kind: str, values: dict[str, Any]) -> list[str]:
    missing = []
    for name in REQUIRED_FIELDS[kind]:
        value = values.get(name)
        if not isinstance(value, str):
            missing.append(name)
        elif name not in _MAY_BE_EMPTY and not value.strip():
            missing.append(name)
    return missing


def parse_action(payload: Any, fallback_message: str) -> ActionParse:
    """Build an action from a decoded JSON value.

    ``type`` is accepted as an alias of ``kind``; unknown keys are ignored.  A
    chat action without a message gets ``fallback_message``.
    """
    if not isinstance(payload, dict):
        return ActionParse(failure=ParseFailure.NOT_AN_OBJECT,
                           detail=f"expected a JSON object, got {type(payload).__name__}")

    kind = payload.get("kind") or payload.get("type")
    if not kind:
        return ActionParse(failure=ParseFailure.MISSING_KIND, detail="reply has no action type")
    kind = str(kind).strip().lower()
    if kind not in KINDS:
        return ActionParse(failure=ParseFailure.UNKNOWN_KIND, detail=f"unknown action type: {kind}")

    values: dict[str, Any] = {k: payload.get(k) for k in ("target", "content", "command", "message")}
    if kind == "chat" and not (isinstance(values["message"], str) and values["message"].strip()):
        values["message"] = fallback_message

    missing = _missing(kind, values)
    if missing:
        return ActionParse(failure=ParseFailure.MISSING_FIELDS,
                           detail=f"{kind} action requires {', '.join(missing)}")

    fields = {name: values[name] for name in REQUIRED_FIELDS[kind]}
    reasoning = payload.get("reasoning")
    if reasoning is not None:
        fields["reasoning"] = str(reasoning)
    return ActionParse(action=_MODELS[kind](**fields))


def parse_reply(text: Optional[str], fallback_message: str) -> ActionParse:
    """Decode a raw model reply into an action."""
    if not text or not text.strip():
        return ActionParse(failure=ParseFailure.EMPTY_REPLY, detail="model returned an empty reply")
    payload, error = load_json(text)
    if error is not None:
        return ActionParse(failure=ParseFailure.INVALID_JSON, detail=f"reply is not valid JSON ({error})")
    return parse_action(payload, fallback_message)


def ensure_complete(action: Action) -> None:
    """Raise :class:`MalformedAction` if ``action`` lacks a required field."""
    if action.kind not in REQUIRED_FIELDS:
        raise MalformedAction(f"unknown action type: {action.kind}")
    missing = _missing(action.kind, {name: getattr(action, name, None) for name in REQUIRED_FIELDS[action.kind]})
    if missing:
        raise MalformedAction(f"{action.kind} action requires {', '.join(missing)}")
