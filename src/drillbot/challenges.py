from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from .normalize import is_token_permutation
from .skills import GameMode

GRAMMAR_OPTION_COUNT = 4


class SchemaError(ValueError):
    """Provider payload is malformed or misses required fields."""


@dataclass(frozen=True)
class WordArrangementChallenge:
    sentence: str
    jumbled_words: tuple[str, ...]
    hint: str

    @property
    def history_text(self) -> str:
        return self.sentence


@dataclass(frozen=True)
class GrammarChoiceChallenge:
    sentence_with_error: str
    options: tuple[str, ...]
    correct_answer: str
    justification: str

    @property
    def history_text(self) -> str:
        return self.sentence_with_error


Challenge = Union[WordArrangementChallenge, GrammarChoiceChallenge]


def _required_text(payload: dict, key: str) -> str:
    val = payload.get(key)
    if not isinstance(val, str) or not val.strip():
        raise SchemaError(f"{key} required")
    return val.strip()


def _required_text_list(payload: dict, key: str) -> list[str]:
    val = payload.get(key)
    if not isinstance(val, list) or not val:
        raise SchemaError(f"{key} list required")
    out: list[str] = []
    for item in val:
        if not isinstance(item, str) or not item.strip():
            raise SchemaError(f"{key} entries must be non-empty strings")
        out.append(item.strip())
    return out


def parse_word_arrangement(payload: Any) -> WordArrangementChallenge:
    if not isinstance(payload, dict):
        raise SchemaError("challenge must be an object")
    sentence = _required_text(payload, "sentence")
    jumbled = _required_text_list(payload, "jumbledWords")
    hint = _required_text(payload, "hint")
    if not is_token_permutation(jumbled, sentence):
        raise SchemaError("jumbledWords is not a permutation of the sentence")
    return WordArrangementChallenge(sentence=sentence, jumbled_words=tuple(jumbled), hint=hint)


def parse_grammar_choice(payload: Any) -> GrammarChoiceChallenge:
    if not isinstance(payload, dict):
        raise SchemaError("challenge must be an object")
    sentence = _required_text(payload, "sentenceWithError")
    options = _required_text_list(payload, "options")
    if len(options) != GRAMMAR_OPTION_COUNT:
        raise SchemaError(f"options must contain exactly {GRAMMAR_OPTION_COUNT} entries")
    if len(set(options)) != len(options):
        raise SchemaError("options must be distinct")
    correct = _required_text(payload, "correctAnswer")
    if correct not in options:
        raise SchemaError("correctAnswer not in options")
    justification = _required_text(payload, "justification")
    return GrammarChoiceChallenge(
        sentence_with_error=sentence,
        options=tuple(options),
        correct_answer=correct,
        justification=justification,
    )


_PARSERS = {
    GameMode.JUMBLED_WORDS: parse_word_arrangement,
    GameMode.GRAMMAR_CHALLENGE: parse_grammar_choice,
}


def parse_challenge(mode: GameMode, payload: Any) -> Challenge:
    return _PARSERS[mode](payload)
