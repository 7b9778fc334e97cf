"""Errors raised while fitting messages into a model's token window."""


class TokenLimitError(ValueError):
    """Base class for budget failures that abort a limiting call."""

    def __init__(self, message: str, tokens: int, budget: int):
        super().__init__(message)
        self.tokens = tokens
        self.budget = budget


class ToolsTooLarge(TokenLimitError):
    """The serialized tool definitions alone exceed the token budget."""

    def __init__(self, tokens: int, budget: int):
        super().__init__(
            f"Too many tokens in function definitions: {tokens} > {budget}",
            tokens,
            budget,
        )


class InsufficientSystemBudget(TokenLimitError):
    """System messages do not fit in the budget left after the tools."""

    def __init__(self, tokens: int, budget: int):
        super().__init__(
            f"Not enough tokens for system message: {tokens} > {budget}",
            tokens,
            budget,
        )
