import pytest

from drillbot.llm import GenerationRequest, RESPONSE_SCHEMAS, build_prompt
from drillbot.skills import Difficulty, GameMode, GrammarTopic


def test_jumbled_prompt_scales_with_difficulty():
    easy = build_prompt(GenerationRequest(kind=GameMode.JUMBLED_WORDS, difficulty=Difficulty.EASY))
    hard = build_prompt(GenerationRequest(kind=GameMode.JUMBLED_WORDS, difficulty=Difficulty.HARD))
    assert "4-6 words" in easy
    assert "11-15 words" in hard
    assert "previously used" not in easy


def test_prompt_lists_previous_sentences():
    request = GenerationRequest(
        kind=GameMode.JUMBLED_WORDS,
        difficulty=Difficulty.MODERATE,
        excluded_texts=("Dogs bark.", "Cats sleep."),
    )
    prompt = build_prompt(request)
    assert "[Dogs bark.; Cats sleep.]" in prompt


def test_grammar_prompt_names_topic_and_history():
    request = GenerationRequest(
        kind=GameMode.GRAMMAR_CHALLENGE,
        difficulty=Difficulty.EASY,
        topic=GrammarTopic.CONJUNCTION,
        excluded_texts=("I like tea but coffee.",),
    )
    prompt = build_prompt(request)
    assert "'Conjunction'" in prompt
    assert "an easy English grammar challenge" in prompt
    assert "I like tea but coffee." in prompt


def test_grammar_prompt_requires_topic():
    with pytest.raises(ValueError):
        build_prompt(GenerationRequest(kind=GameMode.GRAMMAR_CHALLENGE, difficulty=Difficulty.EASY))


def test_every_mode_has_a_response_schema():
    assert set(RESPONSE_SCHEMAS) == set(GameMode)
