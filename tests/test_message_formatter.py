"""Tests for MessageFormatter."""

import pytest
from message_limiter.core.message_limiter import Message, Role, ToolDefinition
from message_limiter.core.tokenizer_service import TokenizerService
from message_limiter.utils.message_formatter import MessageFormatter


class TestMessageFormatter:
    """Test cases for MessageFormatter."""

    def test_from_openai_messages(self):
        """Test converting OpenAI dicts into messages."""
        formatter = MessageFormatter()
        messages = formatter.from_openai_messages([
            {"role": "system", "content": "Be brief."},
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "content": None},
            {"role": "tool", "content": "42", "tool_call_id": "call_1"},
        ])

        assert [m.role for m in messages] == [Role.SYSTEM, Role.USER, Role.ASSISTANT, Role.TOOL]
        assert messages[2].content is None
        assert messages[3].tool_call_id == "call_1"

    def test_legacy_roles_mapped(self):
        """Test that legacy role names map onto supported roles."""
        formatter = MessageFormatter()
        messages = formatter.from_openai_messages([
            {"role": "developer", "content": "Rules"},
            {"role": "function", "name": "lookup", "content": "{}"},
        ])

        assert messages[0].role is Role.SYSTEM
        assert messages[1].role is Role.TOOL
        assert messages[1].name == "lookup"

    def test_unknown_role_rejected(self):
        """Test that unsupported roles raise ValueError."""
        with pytest.raises(ValueError, match="narrator"):
            MessageFormatter().from_openai_messages([{"role": "narrator", "content": "x"}])

    def test_non_text_content_rejected(self):
        """Test that structured content is rejected."""
        with pytest.raises(ValueError):
            MessageFormatter().from_openai_messages([{"role": "user", "content": [{"type": "text"}]}])

    def test_custom_role_mapping(self):
        """Test supplying a custom role mapping."""
        messages = MessageFormatter().from_openai_messages(
            [{"role": "narrator", "content": "Once upon a time"}],
            role_mapping={"narrator": "assistant"},
        )
        assert messages[0].role is Role.ASSISTANT

    def test_to_openai_messages(self):
        """Test rendering messages back to dicts."""
        formatter = MessageFormatter()
        result = formatter.to_openai_messages([
            Message(Role.USER, "Hi"),
            Message(Role.TOOL, "42", tool_call_id="call_1"),
            {"role": "assistant", "content": "raw"},
        ])

        assert result == [
            {"role": "user", "content": "Hi"},
            {"role": "tool", "content": "42", "tool_call_id": "call_1"},
            {"role": "assistant", "content": "raw"},
        ]

    def test_to_openai_tools(self):
        """Test rendering tool definitions."""
        raw = {"type": "function", "function": {"name": "raw"}}
        tools = MessageFormatter().to_openai_tools([ToolDefinition("lookup"), raw])

        assert tools[0]["function"]["name"] == "lookup"
        assert tools[0]["function"]["parameters"] == {"type": "object", "properties": {}}
        assert tools[1] is raw

    def test_get_role_summary(self):
        """Test per-role token summary."""
        summary = MessageFormatter().get_role_summary(
            [
                Message(Role.SYSTEM, "one two"),
                Message(Role.USER, "three"),
                Message(Role.USER, "four five six"),
            ],
            TokenizerService(backend="simple"),
            "gpt-4",
        )

        assert summary["total_messages"] == 3
        assert summary["total_tokens"] == 6
        assert summary["roles"]["user"] == {"messages": 2, "tokens": 4}
        assert summary["roles"]["system"] == {"messages": 1, "tokens": 2}
