from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .arrangement import ArrangementEngine, Zone
from .challenges import GrammarChoiceChallenge, WordArrangementChallenge
from .generator import GenerationError, RateLimitExceeded, RetryingClient
from .i18n import APPRECIATION_MESSAGES, ENCOURAGING_MESSAGES, t
from .ledgers import HistoryLedger, ProgressLedger
from .llm import GenerationRequest
from .normalize import sentences_match, tokenize_sentence
from .skills import Difficulty, GameMode, GrammarTopic

logger = logging.getLogger(__name__)

MAX_WRONG_ATTEMPTS = 3


class SessionState(str, Enum):
    LOADING = "loading"
    ACTIVE = "active"
    CORRECT = "correct"
    REVEALED = "revealed"
    ERROR = "error"


class Outcome(str, Enum):
    PENDING = "pending"
    CORRECT = "correct"
    REVEALED = "revealed"


class SessionStateError(RuntimeError):
    """Action not allowed in the session's current state."""


class NothingAssembled(SessionStateError):
    pass


@dataclass
class AttemptState:
    wrong_attempts: int = 0
    revealed: bool = False
    outcome: Outcome = Outcome.PENDING

    @property
    def attempts_left(self) -> int:
        return max(MAX_WRONG_ATTEMPTS - self.wrong_attempts, 0)


@dataclass(frozen=True)
class Feedback:
    kind: str  # correct | incorrect | none
    message: str = ""


NO_FEEDBACK = Feedback("none")

_GENERATION_ERROR_KEYS: dict[GameMode, str] = {
    GameMode.JUMBLED_WORDS: "error_word",
    GameMode.GRAMMAR_CHALLENGE: "error_grammar",
}


class ChallengeSession:
    """Lifecycle shared by both challenge kinds.

    loading -> active -> correct | revealed, and loading -> error. Every load
    bumps ``generation``; a response arriving for an older generation is
    dropped so the newest fetch always wins.
    """

    mode: GameMode

    def __init__(
        self,
        *,
        client: RetryingClient,
        progress: ProgressLedger,
        history: HistoryLedger,
        skill_key: str,
        difficulty: Difficulty,
        topic: Optional[GrammarTopic] = None,
        ui_lang: str = "en",
        rng: Optional[random.Random] = None,
    ) -> None:
        self._client = client
        self._progress = progress
        self._history = history
        self.skill_key = skill_key
        self.difficulty = difficulty
        self.topic = topic
        self.ui_lang = ui_lang
        self._rng = rng or random.Random()
        self.generation = 0
        self.state = SessionState.LOADING
        self.challenge = None
        self.attempt = AttemptState()
        self.feedback = NO_FEEDBACK
        self.error_message: str | None = None
        self._credited = False

    def _request(self) -> GenerationRequest:
        return GenerationRequest(
            kind=self.mode,
            difficulty=self.difficulty,
            topic=self.topic,
            excluded_texts=self._history.entries(self.skill_key),
        )

    def _install(self, challenge) -> None:
        """Set up per-challenge state once a fetched challenge is accepted."""

    def _discard(self) -> None:
        """Drop per-challenge state when a new load starts."""

    def _require(self, action: str, *states: SessionState) -> None:
        if self.state not in states:
            raise SessionStateError(f"{action} not allowed while {self.state.value}")

    def invalidate(self) -> None:
        self.generation += 1

    async def load(self) -> bool:
        self.generation += 1
        generation = self.generation
        self.state = SessionState.LOADING
        self.challenge = None
        self.attempt = AttemptState()
        self.feedback = NO_FEEDBACK
        self.error_message = None
        self._credited = False
        self._discard()

        try:
            challenge = await self._client.fetch(self._request())
        except GenerationError as exc:
            if generation != self.generation:
                logger.info("session_stale_failure mode=%s generation=%s", self.mode.value, generation)
                return False
            self.state = SessionState.ERROR
            if isinstance(exc, RateLimitExceeded):
                self.error_message = t("error_busy", self.ui_lang)
            else:
                self.error_message = t(_GENERATION_ERROR_KEYS[self.mode], self.ui_lang)
            logger.warning(
                "session_error mode=%s skill_key=%s kind=%s",
                self.mode.value,
                self.skill_key,
                exc.kind,
            )
            return False

        if generation != self.generation:
            logger.info("session_stale_response mode=%s generation=%s", self.mode.value, generation)
            return False
        self.challenge = challenge
        self._install(challenge)
        self.state = SessionState.ACTIVE
        await self._history.append(self.skill_key, challenge.history_text)
        return True

    async def skip(self) -> bool:
        self._require("skip", SessionState.ACTIVE)
        return await self.load()

    async def next(self) -> bool:
        self._require("next", SessionState.CORRECT, SessionState.REVEALED)
        return await self.load()

    async def retry(self) -> bool:
        self._require("retry", SessionState.ERROR)
        return await self.load()

    async def _mark_correct(self, feedback: Feedback) -> None:
        self.state = SessionState.CORRECT
        self.attempt.outcome = Outcome.CORRECT
        self.feedback = feedback
        if self._credited:
            return
        self._credited = True
        total = await self._progress.increment(self.skill_key)
        logger.info("progress_credit skill_key=%s total=%s", self.skill_key, total)

    def _mark_wrong(self) -> bool:
        """Count a wrong attempt; True once no attempts are left."""
        self.attempt.wrong_attempts += 1
        return self.attempt.wrong_attempts >= MAX_WRONG_ATTEMPTS

    def _mark_revealed(self, feedback: Feedback) -> None:
        self.state = SessionState.REVEALED
        self.attempt.revealed = True
        self.attempt.outcome = Outcome.REVEALED
        self.feedback = feedback

    def _praise(self) -> str:
        return self._rng.choice(APPRECIATION_MESSAGES)


class WordArrangementSession(ChallengeSession):
    mode = GameMode.JUMBLED_WORDS
    challenge: WordArrangementChallenge | None

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.engine: ArrangementEngine | None = None

    def _install(self, challenge: WordArrangementChallenge) -> None:
        self.engine = ArrangementEngine(challenge.jumbled_words)

    def _discard(self) -> None:
        self.engine = None

    def _editable(self) -> ArrangementEngine:
        self._require("edit", SessionState.ACTIVE)
        if self.engine is None:
            raise SessionStateError("no words to arrange")
        return self.engine

    def place(self, pool_index: int) -> bool:
        return self._editable().place(pool_index)

    def unplace(self, assembled_index: int) -> bool:
        return self._editable().unplace(assembled_index)

    def move(self, zone: Zone, from_index: int, to_index: int) -> bool:
        return self._editable().move_within_zone(zone, from_index, to_index)

    def transfer(self, from_zone: Zone, from_index: int, to_zone: Zone, to_index: int) -> bool:
        return self._editable().move_between_zones(from_zone, from_index, to_zone, to_index)

    def clear(self) -> bool:
        return self._editable().clear()

    async def check_answer(self) -> Feedback:
        engine = self._editable()
        if not engine.assembled:
            raise NothingAssembled("nothing assembled")
        challenge = self.challenge
        if sentences_match(engine.assembled, challenge.sentence):
            engine.lock()
            await self._mark_correct(Feedback("correct", self._praise()))
            return self.feedback

        if self._mark_wrong():
            engine.reveal(tokenize_sentence(challenge.sentence))
            self._mark_revealed(
                Feedback(
                    "incorrect",
                    t("word_revealed", self.ui_lang).format(sentence=challenge.sentence),
                )
            )
            logger.info("session_revealed mode=%s skill_key=%s", self.mode.value, self.skill_key)
            return self.feedback

        self.feedback = Feedback(
            "incorrect",
            t("word_wrong", self.ui_lang).format(hint=challenge.hint, left=self.attempt.attempts_left),
        )
        return self.feedback


class GrammarChoiceSession(ChallengeSession):
    mode = GameMode.GRAMMAR_CHALLENGE
    challenge: GrammarChoiceChallenge | None

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        if self.topic is None:
            raise ValueError("grammar sessions need a topic")
        self.wrong_picks: list[str] = []

    def _install(self, challenge: GrammarChoiceChallenge) -> None:
        self.wrong_picks = []

    def _discard(self) -> None:
        self.wrong_picks = []

    async def select_option(self, option: str) -> Feedback:
        self._require("select", SessionState.ACTIVE)
        challenge = self.challenge
        if option not in challenge.options:
            raise ValueError(f"unknown option: {option!r}")

        if option == challenge.correct_answer:
            message = t("grammar_correct", self.ui_lang).format(
                praise=self._praise(), justification=challenge.justification
            )
            await self._mark_correct(Feedback("correct", message))
            return self.feedback

        if option not in self.wrong_picks:
            self.wrong_picks.append(option)
        if self._mark_wrong():
            self._mark_revealed(
                Feedback(
                    "incorrect",
                    t("grammar_revealed", self.ui_lang).format(
                        answer=challenge.correct_answer, justification=challenge.justification
                    ),
                )
            )
            logger.info("session_revealed mode=%s skill_key=%s", self.mode.value, self.skill_key)
            return self.feedback

        encouragement = self._rng.choice(ENCOURAGING_MESSAGES).format(topic=self.topic.label)
        self.feedback = Feedback(
            "incorrect",
            t("grammar_wrong", self.ui_lang).format(
                encouragement=encouragement, left=self.attempt.attempts_left
            ),
        )
        return self.feedback

    async def select_index(self, index: int) -> Feedback:
        self._require("select", SessionState.ACTIVE)
        options = self.challenge.options
        if not 0 <= index < len(options):
            raise ValueError(f"option index out of range: {index}")
        return await self.select_option(options[index])

    def option_status(self, option: str) -> str | None:
        challenge = self.challenge
        if challenge is None:
            return None
        if self.state is SessionState.REVEALED:
            return "correct" if option == challenge.correct_answer else "dimmed"
        if self.state is SessionState.CORRECT and option == challenge.correct_answer:
            return "correct"
        if option in self.wrong_picks:
            return "wrong"
        return None


SESSION_TYPES: dict[GameMode, type[ChallengeSession]] = {
    GameMode.JUMBLED_WORDS: WordArrangementSession,
    GameMode.GRAMMAR_CHALLENGE: GrammarChoiceSession,
}
