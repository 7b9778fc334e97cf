"""Context-window sizes for chat-completion models."""

from types import MappingProxyType
from typing import Dict, Mapping, Optional

DEFAULT_MAX_TOKENS = 128000

MODEL_MAX_TOKENS: Mapping[str, int] = MappingProxyType({
    # GPT-4
    "gpt-4o": 128000,
    "gpt-4o-2024-05-13": 128000,
    "gpt-4-turbo": 128000,
    "gpt-4-turbo-2024-04-09": 128000,
    "gpt-4-0125-preview": 128000,
    "gpt-4-turbo-preview": 128000,
    "gpt-4-1106-preview": 128000,
    "gpt-4-vision-preview": 128000,
    "gpt-4-1106-vision-preview": 128000,
    "gpt-4-32k": 32768,
    "gpt-4-32k-0613": 32768,
    "gpt-4-32k-0314": 32768,
    "gpt-4": 8192,
    "gpt-4-0613": 8192,
    "gpt-4-0314": 8192,
    # GPT-3.5
    "gpt-3.5-turbo-0125": 16385,
    "gpt-3.5-turbo": 16385,
    "gpt-3.5-turbo-1106": 16385,
    "gpt-3.5-turbo-instruct": 4096,
    "gpt-3.5-turbo-16k": 16385,
    "gpt-3.5-turbo-0613": 4096,
    "gpt-3.5-turbo-16k-0613": 16385,
    "gpt-3.5-turbo-0301": 4097,
})


class ModelLimitTable:
    """Read-only lookup from model identifier to context-window size."""

    def __init__(self,
                 limits: Optional[Mapping[str, int]] = None,
                 default: int = DEFAULT_MAX_TOKENS):
        """
        Args:
            limits: Model identifier to token ceiling; the built-in table when omitted
            default: Ceiling for identifiers missing from ``limits``
        """
        table = dict(MODEL_MAX_TOKENS if limits is None else limits)
        for model, limit in table.items():
            if not isinstance(limit, int) or limit <= 0:
                raise ValueError(f"Token limit for {model!r} must be a positive integer, got {limit!r}")
        if not isinstance(default, int) or default <= 0:
            raise ValueError(f"Default token limit must be a positive integer, got {default!r}")

        self._limits: Mapping[str, int] = MappingProxyType(table)
        self.default = default

    @property
    def limits(self) -> Mapping[str, int]:
        return self._limits

    def limit_for(self, model: str) -> int:
        """Return the ceiling for ``model``, or the default if it is unlisted."""
        return self._limits.get(model, self.default)

    def with_overrides(self,
                       overrides: Mapping[str, int],
                       default: Optional[int] = None) -> "ModelLimitTable":
        """Return a new table with ``overrides`` layered over this one."""
        merged: Dict[str, int] = dict(self._limits)
        merged.update(overrides)
        return ModelLimitTable(merged, self.default if default is None else default)

    def __contains__(self, model: str) -> bool:
        return model in self._limits

    def __len__(self) -> int:
        return len(self._limits)


DEFAULT_LIMITS = ModelLimitTable()


def max_tokens_for_model(model: str) -> int:
    """Context-window size of ``model`` from the built-in table."""
    return DEFAULT_LIMITS.limit_for(model)
