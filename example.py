#!/usr/bin/env python3
"""
Example usage of MessageLimiter package.
"""

from message_limiter import (
    InsufficientSystemBudget,
    Message,
    MessageLimiter,
    Role,
    TokenizerService,
    ToolDefinition,
    ToolsTooLarge,
    max_tokens_for_model,
)
from message_limiter.utils.message_formatter import MessageFormatter


def main():
    """Demonstrate MessageLimiter functionality."""

    print("=== MessageLimiter Example ===\n")

    tokenizer = TokenizerService(backend="simple")
    limiter = MessageLimiter(tokenizer)
    formatter = MessageFormatter()

    print("1. Model Limits")
    print("-" * 30)
    for model in ["gpt-4o", "gpt-4-32k", "gpt-4", "gpt-3.5-turbo", "unknown-model-xyz"]:
        print(f"{model}: {max_tokens_for_model(model)} tokens")
    print()

    history = [
        Message(Role.SYSTEM, "You are a helpful travel assistant."),
        Message(Role.USER, "I want to visit Lisbon next spring. What should I see?"),
        Message(Role.ASSISTANT, "Belem Tower, the Alfama district, and a day trip to Sintra are good starts."),
        Message(Role.USER, "How many days do I need?"),
        Message(Role.ASSISTANT, "Four days covers the main sights comfortably."),
        Message(Role.USER, "Can you check the weather for April?"),
    ]
    tools = [
        ToolDefinition(
            name="get_weather",
            description="Get the average weather for a city and month",
            parameters={
                "type": "object",
                "properties": {
                    "city": {"type": "string"},
                    "month": {"type": "string"},
                },
                "required": ["city", "month"],
            },
        )
    ]

    print("2. Token Summary")
    print("-" * 30)
    summary = formatter.get_role_summary(history, tokenizer, "gpt-4")
    print(f"Messages: {summary['total_messages']}, tokens: {summary['total_tokens']}")
    print(f"Tools: {limiter.count_tools_tokens(tools, 'gpt-4')} tokens")
    for role, stats in summary["roles"].items():
        print(f"  {role}: {stats['messages']} messages, {stats['tokens']} tokens")
    print()

    print("3. Trimming to Smaller Budgets")
    print("-" * 30)
    tools_tokens = limiter.count_tools_tokens(tools, "gpt-4")
    for extra in [100, 40, 25, 10]:
        budget = tools_tokens + extra
        trimmed = limiter.limit(history, tools, "gpt-4", max_tokens=budget)
        print(f"Budget {budget}: kept {len(trimmed)} of {len(history)} messages")
        for message in formatter.to_openai_messages(trimmed):
            print(f"  [{message['role']}] {message['content']}")
    print()

    print("4. Budget Failures")
    print("-" * 30)
    try:
        limiter.limit(history, tools, "gpt-4", max_tokens=20)
    except ToolsTooLarge as e:
        print(f"ToolsTooLarge: {e}")
    try:
        limiter.limit(history, [], "gpt-4", max_tokens=5)
    except InsufficientSystemBudget as e:
        print(f"InsufficientSystemBudget: {e}")


if __name__ == "__main__":
    main()
