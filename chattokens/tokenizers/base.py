from __future__ import annotations

from abc import ABC, abstractmethod


class UnknownModelError(ValueError):
    """Raised when a model identifier has no known vocabulary."""


class Tokenizer(ABC):
    """Encodes text with the vocabulary of one model.

    Implementations must be deterministic for identical input. Only the
    length of the returned sequence is used by the counter.
    """

    def __init__(self, model: str) -> None:
        self.model = model

    @abstractmethod
    def encode(self, text: str) -> list[int]:
        ...
