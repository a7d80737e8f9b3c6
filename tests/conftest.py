from __future__ import annotations

import re

import pytest
import requests

import chattokens.config as config_mod
from chattokens.counter import Counter, new_counter
from chattokens.models import Tool
from chattokens.tokenizers import Tokenizer

# Errors meaning the vocabulary could not be fetched, not that it is wrong
VOCAB_UNAVAILABLE = (OSError, requests.exceptions.RequestException)

_WORDS = re.compile(r"\w+|[^\w\s]")


class WordTokenizer(Tokenizer):
    """One token per word or punctuation mark. Deterministic, no vocabulary."""

    def encode(self, text: str) -> list[int]:
        return [len(t) for t in _WORDS.findall(text)]


@pytest.fixture
def counter():
    return Counter("words", WordTokenizer("words"))


@pytest.fixture(scope="session")
def gpt4o():
    """Counter with the real gpt-4o vocabulary; skipped if it can't be loaded."""
    try:
        return new_counter("gpt-4o")
    except VOCAB_UNAVAILABLE as e:
        pytest.skip(f"gpt-4o vocabulary unavailable: {e}")


@pytest.fixture
def tmp_config(tmp_path, monkeypatch):
    monkeypatch.setattr(config_mod, "CONFIG_DIR", tmp_path)
    monkeypatch.setattr(config_mod, "CONFIG_FILE", tmp_path / "config.toml")
    return tmp_path / "config.toml"


@pytest.fixture
def weather_tool():
    return Tool(
        name="get_current_weather",
        description="Get the current weather in a given location.",
        parameters={
            "type": "object",
            "properties": {
                "location": {
                    "type": "string",
                    "description": "The city and state, e.g. San Francisco, CA",
                },
                "unit": {"type": "string", "enum": ["celsius", "fahrenheit"]},
            },
            "required": ["location"],
        },
    )
