from __future__ import annotations
import re
from collections import Counter
from typing import Iterable

_TRAILING_PUNCT = ".,?!"

def strip_trailing_punct(s: str) -> str:
    # exactly one character; "Really?!" keeps its "?"
    if s and s[-1] in _TRAILING_PUNCT:
        return s[:-1]
    return s

def canonical_answer(sentence: str) -> str:
    return strip_trailing_punct((sentence or "").strip()).strip()

def tokenize_sentence(sentence: str) -> list[str]:
    return [tok for tok in re.split(r"\s+", canonical_answer(sentence)) if tok]

def join_tokens(tokens: Iterable[str]) -> str:
    return " ".join(tokens).strip()

def sentences_match(tokens: Iterable[str], sentence: str) -> bool:
    # whitespace runs in the target count as one space
    return join_tokens(tokens).lower() == join_tokens(tokenize_sentence(sentence)).lower()

def is_token_permutation(tokens: Iterable[str], sentence: str) -> bool:
    expected = Counter(tok.lower() for tok in tokenize_sentence(sentence))
    actual = Counter(str(tok).strip().lower() for tok in tokens)
    return expected == actual
