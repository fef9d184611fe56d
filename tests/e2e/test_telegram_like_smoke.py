import json

import pytest

from drillbot.skills import Difficulty, GameMode, GrammarTopic, derive_skill_key
from tests.telegram_harness.harness import BotHarness, ScriptedProvider

USER = 111

WORD_PAYLOAD = json.dumps(
    {"sentence": "The cat sleeps.", "jumbledWords": ["sleeps", "The", "cat"], "hint": "Start with the subject."}
)
GRAMMAR_PAYLOAD = json.dumps(
    {
        "sentenceWithError": "She go to school every day.",
        "options": ["goes", "going", "gone", "went"],
        "correctAnswer": "goes",
        "justification": "Third person singular takes -s in the present simple.",
    }
)


async def _click(harness: BotHarness, data: str) -> None:
    message = harness.last_bot_message(USER)
    assert message is not None
    await harness.click(from_user_id=USER, chat_id=USER, message=message, data=data)


def _text(harness: BotHarness) -> str:
    message = harness.last_bot_message(USER)
    assert message is not None
    return message.text or ""


@pytest.mark.asyncio
async def test_word_round_is_solved_and_credited(tmp_path):
    provider = ScriptedProvider([WORD_PAYLOAD])
    harness = await BotHarness.create(tmp_path, provider=provider)
    try:
        await harness.send_text(user_id=USER, text="/start")
        assert "Choose Your Challenge" in _text(harness)
        assert "mode:jumbled_words" in harness.find_callback_data(USER)

        await _click(harness, "mode:jumbled_words")
        assert "Select a Zone to Begin" in _text(harness)

        await _click(harness, "zone:easy")
        assert "0 / 200 Completed" in _text(harness)
        assert "Generating" not in _text(harness)
        assert len(provider.requests) == 1
        assert provider.requests[0].kind is GameMode.JUMBLED_WORDS

        # pool is ["sleeps", "The", "cat"]; build "The cat sleeps"
        for idx in (1, 1, 0):
            await _click(harness, f"pool:1:{idx}")
        assert "The cat sleeps" in _text(harness)

        await _click(harness, "check:1")
        text = _text(harness)
        assert "1 / 200 Completed" in text
        assert "next:1" in harness.find_callback_data(USER)

        key = derive_skill_key(Difficulty.EASY, GameMode.JUMBLED_WORDS, None)
        assert harness.app.progress.count(key) == 1
        assert harness.app.history.entries(key) == ("The cat sleeps.",)

        await harness.send_text(user_id=USER, text="/progress")
        assert "Jumbled Words / Silver Zone (Easy): 1" in _text(harness)
    finally:
        await harness.close()


@pytest.mark.asyncio
async def test_grammar_round_reveals_after_three_wrong_picks(tmp_path):
    provider = ScriptedProvider([GRAMMAR_PAYLOAD, GRAMMAR_PAYLOAD.replace("She go", "He go")])
    harness = await BotHarness.create(tmp_path, provider=provider)
    try:
        await harness.send_text(user_id=USER, text="/start")
        await _click(harness, "mode:grammar_challenge")
        await _click(harness, "zone:hard")
        assert "Select a Grammar Topic" in _text(harness)

        await _click(harness, "topic:verb")
        assert "She go to school every day." in _text(harness)
        assert provider.requests[0].topic is GrammarTopic.VERB

        await _click(harness, "opt:1:1")
        assert "2 attempts left" in _text(harness)
        await _click(harness, "opt:1:2")
        assert "1 attempts left" in _text(harness)
        await _click(harness, "opt:1:3")
        assert 'The correct answer is "goes"' in _text(harness)

        key = derive_skill_key(Difficulty.HARD, GameMode.GRAMMAR_CHALLENGE, GrammarTopic.VERB)
        assert harness.app.progress.count(key) == 0

        await _click(harness, "next:1")
        assert "He go to school every day." in _text(harness)
        # the second request must exclude the first sentence
        assert provider.requests[1].excluded_texts == ("She go to school every day.",)
    finally:
        await harness.close()


@pytest.mark.asyncio
async def test_rate_limited_fetch_shows_busy_then_retry_recovers(tmp_path):
    busy = RuntimeError("429 RESOURCE_EXHAUSTED")
    provider = ScriptedProvider([busy] * 5 + [WORD_PAYLOAD])
    harness = await BotHarness.create(tmp_path, provider=provider)
    try:
        await harness.send_text(user_id=USER, text="/start")
        await _click(harness, "mode:jumbled_words")
        await _click(harness, "zone:moderate")
        assert "currently busy" in _text(harness)
        assert len(provider.requests) == 5
        assert "retry:1" in harness.find_callback_data(USER)

        await _click(harness, "retry:1")
        assert "Jumbled words:" in _text(harness)
        assert harness.find_callback_data(USER, predicate=lambda v: v.startswith("pool:2:"))
    finally:
        await harness.close()


@pytest.mark.asyncio
async def test_stale_buttons_and_reset(tmp_path):
    provider = ScriptedProvider([WORD_PAYLOAD, WORD_PAYLOAD.replace("The cat", "A cat").replace('"The"', '"A"')])
    harness = await BotHarness.create(tmp_path, provider=provider)
    try:
        await harness.send_text(user_id=USER, text="/start")
        await _click(harness, "mode:jumbled_words")
        await _click(harness, "zone:easy")
        await _click(harness, "skip:1")
        assert harness.app.session is not None
        assert harness.app.session.generation == 2

        await _click(harness, "pool:1:0")
        session = harness.bot.session
        assert session.toasts[-1] == "This challenge is no longer active."

        await _click(harness, "check:2")
        assert session.toasts[-1] == "Build a sentence first."

        await _click(harness, "reset")
        assert "Choose Your Challenge" in _text(harness)
        assert harness.app.session is None
        assert harness.app.history.snapshot() == {}
    finally:
        await harness.close()
