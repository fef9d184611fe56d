import itertools

from drillbot.skills import (
    DIFFICULTY_LABELS,
    GAME_MODE_LABELS,
    GRAMMAR_TOPIC_LABELS,
    SKILL_KEY_SEPARATOR,
    Difficulty,
    GameMode,
    GrammarTopic,
    derive_skill_key,
    describe_skill_key,
    parse_skill_key,
)


def _all_complete_selections():
    for difficulty in Difficulty:
        yield difficulty, GameMode.JUMBLED_WORDS, None
        for topic in GrammarTopic:
            yield difficulty, GameMode.GRAMMAR_CHALLENGE, topic


def test_label_tables_cover_every_variant():
    assert set(DIFFICULTY_LABELS) == set(Difficulty)
    assert set(GAME_MODE_LABELS) == set(GameMode)
    assert set(GRAMMAR_TOPIC_LABELS) == set(GrammarTopic)
    assert GrammarTopic.PREPOSITION.label == "Preposition"
    assert Difficulty.HARD.label == "Diamond Zone (Difficult)"


def test_variant_codes_never_contain_separator():
    for member in itertools.chain(Difficulty, GameMode, GrammarTopic):
        assert SKILL_KEY_SEPARATOR not in member.value


def test_skill_keys_are_distinct_for_distinct_selections():
    keys = [derive_skill_key(*sel) for sel in _all_complete_selections()]
    assert None not in keys
    assert len(keys) == len(set(keys)) == 3 + 3 * 9


def test_word_mode_ignores_topic():
    plain = derive_skill_key(Difficulty.EASY, GameMode.JUMBLED_WORDS, None)
    with_topic = derive_skill_key(Difficulty.EASY, GameMode.JUMBLED_WORDS, GrammarTopic.NOUN)
    assert plain == with_topic == "easy|jumbled_words|"


def test_incomplete_selection_has_no_key():
    assert derive_skill_key(Difficulty.EASY, None, None) is None
    assert derive_skill_key(None, GameMode.JUMBLED_WORDS, None) is None
    assert derive_skill_key(Difficulty.HARD, GameMode.GRAMMAR_CHALLENGE, None) is None


def test_parse_and_describe_skill_key():
    key = derive_skill_key(Difficulty.MODERATE, GameMode.GRAMMAR_CHALLENGE, GrammarTopic.ARTICLE)
    assert parse_skill_key(key) == (Difficulty.MODERATE, GameMode.GRAMMAR_CHALLENGE, GrammarTopic.ARTICLE)
    assert describe_skill_key(key) == "Grammar Challenge / Gold Zone (Moderate) / Article"
    assert describe_skill_key("easy|jumbled_words|") == "Jumbled Words / Silver Zone (Easy)"


def test_parse_rejects_foreign_keys():
    assert parse_skill_key("easy|jumbled_words|noun") is None
    assert parse_skill_key("hard|grammar_challenge|") is None
    assert parse_skill_key("nope") is None
    assert describe_skill_key("nope") == "nope"
