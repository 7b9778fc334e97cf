"""Tokenizer service for model-aware token counting."""

import logging
import re
import threading
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Union

import tiktoken
from tiktoken.model import MODEL_PREFIX_TO_ENCODING, MODEL_TO_ENCODING

logger = logging.getLogger(__name__)

# Model whose encoding stands in for identifiers tiktoken does not know.
DEFAULT_ENCODING_MODEL = "gpt-4o"


def resolve_encoding(model: str, fallback_model: str = DEFAULT_ENCODING_MODEL) -> str:
    """
    Resolve the tiktoken encoding name used for a model identifier.

    Exact model names are looked up first, then known name prefixes
    (e.g. ``gpt-4o-2024-08-06`` -> ``gpt-4o-``). Anything else resolves to
    the encoding of ``fallback_model``.

    Args:
        model: Model identifier as sent to the completion endpoint
        fallback_model: Model whose encoding is used for unknown identifiers

    Returns:
        Encoding name, e.g. ``"o200k_base"``
    """
    if model in MODEL_TO_ENCODING:
        return MODEL_TO_ENCODING[model]
    for prefix, encoding_name in MODEL_PREFIX_TO_ENCODING.items():
        if model.startswith(prefix):
            return encoding_name

    logger.debug("No encoding registered for model %r, using %r", model, fallback_model)
    if fallback_model != model:
        return resolve_encoding(fallback_model, fallback_model=DEFAULT_ENCODING_MODEL)
    return MODEL_TO_ENCODING[DEFAULT_ENCODING_MODEL]


class BaseTokenizer(ABC):
    """Abstract base class for tokenizers."""

    @abstractmethod
    def count_tokens(self, text: str, model: str) -> int:
        """Count tokens in the given text for the given model."""
        pass


class SimpleTokenizer(BaseTokenizer):
    """Model-agnostic tokenizer using regex-based word splitting."""

    def __init__(self):
        self.word_pattern = re.compile(r'\w+|[^\w\s]')

    def count_tokens(self, text: str, model: str) -> int:
        """Count words and punctuation marks; the model is ignored."""
        if not text:
            return 0
        return len(self.word_pattern.findall(text))


class TiktokenTokenizer(BaseTokenizer):
    """
    Tokenizer backed by tiktoken encodings.

    Encoders are created on first use and cached per model identifier.
    The cache is written under a lock and each key is initialized once;
    after that, lookups are plain dict reads.
    """

    def __init__(self, fallback_model: str = DEFAULT_ENCODING_MODEL):
        self.fallback_model = fallback_model
        self._encoders: Dict[str, tiktoken.Encoding] = {}
        self._lock = threading.Lock()

    def encoding_for(self, model: str) -> tiktoken.Encoding:
        """Return the cached encoder for a model, creating it if needed."""
        encoding = self._encoders.get(model)
        if encoding is not None:
            return encoding

        with self._lock:
            encoding = self._encoders.get(model)
            if encoding is None:
                encoding = tiktoken.get_encoding(resolve_encoding(model, self.fallback_model))
                self._encoders[model] = encoding
        return encoding

    def count_tokens(self, text: str, model: str) -> int:
        """Count tokens using the model's tiktoken encoding."""
        if not text:
            return 0
        return len(self.encoding_for(model).encode(text, disallowed_special=()))

    def cached_models(self) -> List[str]:
        """Model identifiers with an encoder already constructed."""
        return list(self._encoders)

    def clear_cache(self):
        """Drop every cached encoder."""
        with self._lock:
            self._encoders.clear()


class TokenizerService:
    """Unified tokenizer service supporting multiple backends."""

    def __init__(self, backend: str = "tiktoken", **kwargs):
        """
        Initialize tokenizer service.

        Args:
            backend: Tokenizer backend ('tiktoken', 'simple')
            **kwargs: Additional arguments for specific backends
        """
        if backend == "tiktoken":
            self.tokenizer = TiktokenTokenizer(**kwargs)
        elif backend == "simple":
            self.tokenizer = SimpleTokenizer(**kwargs)
        else:
            raise ValueError(f"Unknown tokenizer backend: {backend}")
        self.backend = backend

    def encode(self, model: str, text: Optional[str]) -> int:
        """Return the number of tokens ``text`` takes for ``model``."""
        return self.tokenizer.count_tokens(text or "", model)

    def count_tokens(self, text: Union[str, List[str], Dict[str, str]], model: str) -> int:
        """
        Count tokens in text.

        Args:
            text: String, list of strings, or dict of strings
            model: Model identifier whose encoding is used

        Returns:
            Total token count
        """
        if isinstance(text, str):
            return self.encode(model, text)
        elif isinstance(text, list):
            return sum(self.encode(model, item) for item in text)
        elif isinstance(text, dict):
            total = 0
            for key, value in text.items():
                total += self.encode(model, str(key))
                total += self.encode(model, str(value))
            return total
        else:
            return self.encode(model, str(text))

    def clear_cache(self):
        """Drop cached encoders, if the backend keeps any."""
        if isinstance(self.tokenizer, TiktokenTokenizer):
            self.tokenizer.clear_cache()

    def get_tokenizer_info(self) -> Dict[str, Union[str, List[str]]]:
        """Get information about the current tokenizer."""
        info = {
            "backend": self.backend,
            "class": type(self.tokenizer).__name__,
        }

        if isinstance(self.tokenizer, TiktokenTokenizer):
            info["fallback_model"] = self.tokenizer.fallback_model
            info["cached_models"] = self.tokenizer.cached_models()

        return info


_default_service: Optional[TokenizerService] = None
_default_service_lock = threading.Lock()


def get_default_service() -> TokenizerService:
    """Return the process-wide tiktoken service, creating it once."""
    global _default_service
    if _default_service is None:
        with _default_service_lock:
            if _default_service is None:
                _default_service = TokenizerService()
    return _default_service


def encode(model: str, text: Optional[str]) -> int:
    """Count tokens of ``text`` for ``model`` with the shared service."""
    return get_default_service().encode(model, text)
