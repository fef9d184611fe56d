from __future__ import annotations

from enum import Enum

SKILL_KEY_SEPARATOR = "|"


class Difficulty(str, Enum):
    EASY = "easy"
    MODERATE = "moderate"
    HARD = "hard"

    @property
    def label(self) -> str:
        return DIFFICULTY_LABELS[self]


class GameMode(str, Enum):
    JUMBLED_WORDS = "jumbled_words"
    GRAMMAR_CHALLENGE = "grammar_challenge"

    @property
    def label(self) -> str:
        return GAME_MODE_LABELS[self]


class GrammarTopic(str, Enum):
    ARTICLE = "article"
    NOUN = "noun"
    PRONOUN = "pronoun"
    VERB = "verb"
    ADVERB = "adverb"
    ADJECTIVE = "adjective"
    PREPOSITION = "preposition"
    CONJUNCTION = "conjunction"
    INTERJECTION = "interjection"

    @property
    def label(self) -> str:
        return GRAMMAR_TOPIC_LABELS[self]


DIFFICULTY_LABELS: dict[Difficulty, str] = {
    Difficulty.EASY: "Silver Zone (Easy)",
    Difficulty.MODERATE: "Gold Zone (Moderate)",
    Difficulty.HARD: "Diamond Zone (Difficult)",
}

GAME_MODE_LABELS: dict[GameMode, str] = {
    GameMode.JUMBLED_WORDS: "Jumbled Words",
    GameMode.GRAMMAR_CHALLENGE: "Grammar Challenge",
}

GRAMMAR_TOPIC_LABELS: dict[GrammarTopic, str] = {
    GrammarTopic.ARTICLE: "Article",
    GrammarTopic.NOUN: "Noun",
    GrammarTopic.PRONOUN: "Pronoun",
    GrammarTopic.VERB: "Verb",
    GrammarTopic.ADVERB: "Adverb",
    GrammarTopic.ADJECTIVE: "Adjective",
    GrammarTopic.PREPOSITION: "Preposition",
    GrammarTopic.CONJUNCTION: "Conjunction",
    GrammarTopic.INTERJECTION: "Interjection",
}

# modes that need a grammar topic in addition to a difficulty
_TOPIC_REQUIRED: dict[GameMode, bool] = {
    GameMode.JUMBLED_WORDS: False,
    GameMode.GRAMMAR_CHALLENGE: True,
}


def requires_topic(mode: GameMode) -> bool:
    return _TOPIC_REQUIRED[mode]


def derive_skill_key(
    difficulty: Difficulty | None,
    mode: GameMode | None,
    topic: GrammarTopic | None,
) -> str | None:
    """Composite ledger key for a difficulty/mode/topic selection.

    Returns None while the selection is incomplete: no mode, no difficulty, or a
    grammar mode without a topic. Word mode ignores the topic entirely, so the
    topic slot of its key is always empty.
    """
    if mode is None or difficulty is None:
        return None
    if requires_topic(mode):
        if topic is None:
            return None
        topic_code = topic.value
    else:
        topic_code = ""
    return SKILL_KEY_SEPARATOR.join((difficulty.value, mode.value, topic_code))


def parse_skill_key(key: str) -> tuple[Difficulty, GameMode, GrammarTopic | None] | None:
    parts = (key or "").split(SKILL_KEY_SEPARATOR)
    if len(parts) != 3:
        return None
    try:
        difficulty = Difficulty(parts[0])
        mode = GameMode(parts[1])
        topic = GrammarTopic(parts[2]) if parts[2] else None
    except ValueError:
        return None
    if derive_skill_key(difficulty, mode, topic) != key:
        return None
    return difficulty, mode, topic


def describe_skill_key(key: str) -> str:
    parsed = parse_skill_key(key)
    if parsed is None:
        return key
    difficulty, mode, topic = parsed
    parts = [mode.label, difficulty.label]
    if topic is not None:
        parts.append(topic.label)
    return " / ".join(parts)
