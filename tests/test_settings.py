"""Tests for LimiterConfig."""

import pytest
from message_limiter.config.settings import LimiterConfig, get_default_config
from message_limiter.core.message_limiter import Message, MessageLimiter, Role
from message_limiter.core.tokenizer_service import SimpleTokenizer, TiktokenTokenizer


class TestLimiterConfig:
    """Test cases for LimiterConfig."""

    def test_default_config(self):
        """Test the default configuration values."""
        config = get_default_config()

        assert config.default_model == "gpt-4o"
        assert config.tokenizer_backend == "tiktoken"
        assert config.default_max_tokens == 128000
        assert config.model_limits == {}
        assert config.validate() == []

    def test_from_dict(self):
        """Test building configuration from a dictionary."""
        config = LimiterConfig.from_dict({
            "model": {
                "default": "gpt-4",
                "default_max_tokens": 32000,
                "limits": {"local-llm": 4096}
            },
            "tokenizer": {"backend": "simple", "fallback_model": "gpt-4"}
        })

        assert config.default_model == "gpt-4"
        assert config.default_max_tokens == 32000
        assert config.model_limits == {"local-llm": 4096}
        assert config.tokenizer_backend == "simple"
        assert config.fallback_model == "gpt-4"

    def test_yaml_round_trip(self, tmp_path):
        """Test saving and loading YAML configuration."""
        config = LimiterConfig(default_model="gpt-4", model_limits={"local-llm": 4096})
        path = tmp_path / "nested" / "limiter.yaml"
        config.save_yaml(str(path))

        assert LimiterConfig.from_file(str(path)) == config

    def test_json_round_trip(self, tmp_path):
        """Test saving and loading JSON configuration."""
        config = LimiterConfig(tokenizer_backend="simple", default_max_tokens=1000)
        path = tmp_path / "limiter.json"
        config.save_json(str(path))

        assert LimiterConfig.from_file(str(path)) == config

    def test_empty_yaml(self, tmp_path):
        """Test that an empty YAML file yields the defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")

        assert LimiterConfig.from_yaml(str(path)) == get_default_config()

    def test_validate(self):
        """Test configuration validation."""
        config = LimiterConfig(
            default_model="",
            tokenizer_backend="sentencepiece",
            default_max_tokens=0,
            model_limits={"broken": -1}
        )
        issues = config.validate()

        assert len(issues) == 4
        assert any("backend" in issue for issue in issues)
        assert any("broken" in issue for issue in issues)


class TestLimiterFromConfig:
    """Test cases for MessageLimiter.from_config."""

    def test_simple_backend_and_limits(self):
        """Test that backend and limits come from the configuration."""
        config = LimiterConfig(
            tokenizer_backend="simple",
            default_max_tokens=50,
            model_limits={"tiny-model": 6}
        )
        limiter = MessageLimiter.from_config(config)

        assert isinstance(limiter.tokenizer.tokenizer, SimpleTokenizer)
        assert limiter.limits.limit_for("tiny-model") == 6
        assert limiter.limits.limit_for("gpt-4") == 8192
        assert limiter.limits.limit_for("unknown") == 50

        messages = [
            Message(Role.USER, "one two three four"),
            Message(Role.USER, "five six seven"),
        ]
        assert limiter.limit(messages, [], "tiny-model") == [messages[1]]

    def test_tiktoken_fallback_model(self):
        """Test that the fallback model reaches the tokenizer."""
        limiter = MessageLimiter.from_config(LimiterConfig(fallback_model="gpt-4"))

        assert isinstance(limiter.tokenizer.tokenizer, TiktokenTokenizer)
        assert limiter.tokenizer.tokenizer.fallback_model == "gpt-4"

    def test_invalid_config_rejected(self):
        """Test that invalid configuration cannot build a limiter."""
        with pytest.raises(ValueError):
            MessageLimiter.from_config(LimiterConfig(tokenizer_backend="bogus"))


class TestLimiterConfigEmptySections:
    """Test cases for YAML files with empty sections."""

    def test_empty_sections_use_defaults(self, tmp_path):
        """Test that present-but-empty sections fall back to defaults."""
        path = tmp_path / "limiter.yaml"
        path.write_text("model:\ntokenizer:\n", encoding="utf-8")

        assert LimiterConfig.from_yaml(str(path)) == get_default_config()

    def test_empty_limits(self):
        """Test that an empty limits key yields no overrides."""
        config = LimiterConfig.from_dict({"model": {"default": "gpt-4", "limits": None}})

        assert config.default_model == "gpt-4"
        assert config.model_limits == {}
