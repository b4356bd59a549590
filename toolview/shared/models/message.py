"""Persisted chat message and tool call declaration models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
import time
import uuid


def _now_ms() -> int:
    return int(time.time() * 1000)


def _gen_id() -> str:
    return str(uuid.uuid4())[:8]


class MessageRole(Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    TOOL = "tool"


@dataclass
class ToolCallDeclaration:
    """An assistant's stated intent to call a tool."""
    call_id: str
    name: str
    arguments: dict[str, Any] = field(default_factory=dict)
    partial_args_json: str | None = None


@dataclass
class Message:
    role: MessageRole
    content: str = ""
    id: str = field(default_factory=_gen_id)
    created_at: int = field(default_factory=_now_ms)  # epoch milliseconds
    # Assistant messages
    tool_calls: list[ToolCallDeclaration] = field(default_factory=list)
    # Tool-role messages
    tool_call_id: str | None = None
    tool_name: str | None = None
    tool_success: bool = True
    result_metadata: dict[str, Any] | None = None

    @property
    def is_tool_result(self) -> bool:
        return self.role == MessageRole.TOOL and bool(self.tool_call_id)


def _pick(data: dict, *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


_FALSE_STRINGS = frozenset({"false", "0", "no"})
_TRUE_STRINGS = frozenset({"true", "1", "yes"})


def _call_id(value: Any) -> str | None:
    """Call ids compare as strings; numeric ids from JSON/YAML are converted."""
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    return text or None


def _success(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _FALSE_STRINGS:
            return False
        if text in _TRUE_STRINGS:
            return True
    return True


def declaration_from_dict(data: dict[str, Any]) -> ToolCallDeclaration:
    arguments = _pick(data, "arguments", "args", default={})
    if not isinstance(arguments, dict):
        arguments = {}
    return ToolCallDeclaration(
        call_id=_call_id(_pick(data, "callId", "call_id", "id")) or "",
        name=str(_pick(data, "name", default="")),
        arguments=arguments,
        partial_args_json=_pick(data, "partialArgsJson", "partial_args_json", "argsJson"),
    )


def message_from_dict(data: dict[str, Any]) -> Message:
    """Build a Message from a stored dict (camelCase or snake_case keys)."""
    try:
        role = MessageRole(str(data.get("role", "user")).lower())
    except ValueError:
        role = MessageRole.SYSTEM

    tool_calls = [
        declaration_from_dict(tc)
        for tc in (_pick(data, "toolCalls", "tool_calls", default=[]) or [])
        if isinstance(tc, dict)
    ]
    metadata = _pick(data, "resultMetadata", "result_metadata")
    created_at = _pick(data, "createdAt", "created_at", "timestamp")
    content = data.get("content", "")

    return Message(
        role=role,
        content=content if isinstance(content, str) else "",
        id=str(data.get("id") or _gen_id()),
        created_at=int(created_at) if isinstance(created_at, (int, float)) else _now_ms(),
        tool_calls=tool_calls,
        tool_call_id=_call_id(_pick(data, "toolCallId", "tool_call_id")),
        tool_name=_pick(data, "toolName", "tool_name"),
        tool_success=_success(_pick(data, "toolSuccess", "tool_success", default=True)),
        result_metadata=metadata if isinstance(metadata, dict) else None,
    )


def message_to_dict(message: Message) -> dict[str, Any]:
    d: dict[str, Any] = {
        "id": message.id,
        "role": message.role.value,
        "content": message.content,
        "createdAt": message.created_at,
    }
    if message.tool_calls:
        d["toolCalls"] = [
            {
                "callId": tc.call_id,
                "name": tc.name,
                "arguments": tc.arguments,
                **({"partialArgsJson": tc.partial_args_json} if tc.partial_args_json else {}),
            }
            for tc in message.tool_calls
        ]
    if message.tool_call_id:
        d["toolCallId"] = message.tool_call_id
        d["toolName"] = message.tool_name
        d["toolSuccess"] = message.tool_success
        d["resultMetadata"] = message.result_metadata or {}
    return d
