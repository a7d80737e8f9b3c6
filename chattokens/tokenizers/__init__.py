from __future__ import annotations

import importlib

from chattokens.tokenizers.base import Tokenizer, UnknownModelError

BACKEND_MAP: dict[str, str] = {
    "tiktoken": "chattokens.tokenizers.tiktoken_backend.TiktokenTokenizer",
}

__all__ = ["BACKEND_MAP", "Tokenizer", "UnknownModelError", "get_tokenizer"]


def get_tokenizer(model: str, backend: str = "tiktoken") -> Tokenizer:
    """Factory: resolve backend name to class and load the model's vocabulary."""
    if backend not in BACKEND_MAP:
        raise ValueError(f"Unknown tokenizer backend '{backend}'. Available: {list(BACKEND_MAP)}")
    module_path, class_name = BACKEND_MAP[backend].rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls = getattr(module, class_name)
    return cls(model=model)
