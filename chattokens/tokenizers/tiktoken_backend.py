from __future__ import annotations

import logging

import tiktoken

from chattokens.tokenizers.base import Tokenizer, UnknownModelError

logger = logging.getLogger(__name__)


class TiktokenTokenizer(Tokenizer):
    def __init__(self, model: str) -> None:
        super().__init__(model)
        try:
            self._encoding = tiktoken.encoding_for_model(model)
        except KeyError:
            raise UnknownModelError(f"No known vocabulary for model '{model}'") from None
        logger.debug("Loaded vocabulary %s for model %s", self._encoding.name, model)

    def encode(self, text: str) -> list[int]:
        # Special-token text in user content is ordinary text for counting
        return self._encoding.encode(text, disallowed_special=())
