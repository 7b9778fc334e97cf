"""Configuration settings for message limiting."""

from typing import Dict, Any, List
from dataclasses import dataclass, field
import yaml
import json
from pathlib import Path

from ..core.model_limits import DEFAULT_MAX_TOKENS
from ..core.tokenizer_service import DEFAULT_ENCODING_MODEL

TOKENIZER_BACKENDS = ("tiktoken", "simple")


@dataclass
class LimiterConfig:
    """Main configuration for message limiting."""
    default_model: str = "gpt-4o"
    fallback_model: str = DEFAULT_ENCODING_MODEL
    tokenizer_backend: str = "tiktoken"
    default_max_tokens: int = DEFAULT_MAX_TOKENS
    model_limits: Dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'LimiterConfig':
        """Create configuration from dictionary."""
        tokenizer_data = config_dict.get('tokenizer') or {}
        model_data = config_dict.get('model') or {}

        return cls(
            default_model=model_data.get('default', 'gpt-4o'),
            fallback_model=tokenizer_data.get('fallback_model', DEFAULT_ENCODING_MODEL),
            tokenizer_backend=tokenizer_data.get('backend', 'tiktoken'),
            default_max_tokens=model_data.get('default_max_tokens', DEFAULT_MAX_TOKENS),
            model_limits=dict(model_data.get('limits') or {})
        )

    @classmethod
    def from_yaml(cls, file_path: str) -> 'LimiterConfig':
        """Load configuration from YAML file."""
        with open(file_path, 'r', encoding='utf-8') as f:
            config_dict = yaml.safe_load(f) or {}
        return cls.from_dict(config_dict)

    @classmethod
    def from_json(cls, file_path: str) -> 'LimiterConfig':
        """Load configuration from JSON file."""
        with open(file_path, 'r', encoding='utf-8') as f:
            config_dict = json.load(f)
        return cls.from_dict(config_dict)

    @classmethod
    def from_file(cls, file_path: str) -> 'LimiterConfig':
        """Load configuration from a YAML or JSON file, chosen by extension."""
        if Path(file_path).suffix.lower() == '.json':
            return cls.from_json(file_path)
        return cls.from_yaml(file_path)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            'model': {
                'default': self.default_model,
                'default_max_tokens': self.default_max_tokens,
                'limits': dict(self.model_limits)
            },
            'tokenizer': {
                'backend': self.tokenizer_backend,
                'fallback_model': self.fallback_model
            }
        }

    def save_yaml(self, file_path: str):
        """Save configuration to YAML file."""
        Path(file_path).parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, 'w', encoding='utf-8') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, allow_unicode=True)

    def save_json(self, file_path: str):
        """Save configuration to JSON file."""
        Path(file_path).parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    def validate(self) -> List[str]:
        """
        Validate configuration and return list of issues.

        Returns:
            List of validation issues (empty if valid)
        """
        issues = []

        if self.tokenizer_backend not in TOKENIZER_BACKENDS:
            issues.append(f"Unknown tokenizer backend '{self.tokenizer_backend}'")

        if not isinstance(self.default_max_tokens, int) or self.default_max_tokens <= 0:
            issues.append("Default max tokens must be a positive integer")

        for model, limit in self.model_limits.items():
            if not isinstance(limit, int) or limit <= 0:
                issues.append(f"Model '{model}': limit must be a positive integer")

        if not self.default_model:
            issues.append("Default model must not be empty")

        return issues


def get_default_config() -> LimiterConfig:
    """Get default configuration."""
    return LimiterConfig()
