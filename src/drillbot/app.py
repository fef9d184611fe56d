from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .generator import RetryingClient
from .i18n import t
from .ledgers import HistoryLedger, LedgerStore, ProgressLedger, reset_ledgers
from .sessions import SESSION_TYPES, ChallengeSession
from .skills import Difficulty, GameMode, GrammarTopic, derive_skill_key, requires_topic

logger = logging.getLogger(__name__)

TOTAL_CHALLENGES = 200


class Screen(str, Enum):
    MODE = "mode"
    ZONE = "zone"
    TOPIC = "topic"
    GAME = "game"


@dataclass
class Selection:
    difficulty: Difficulty = Difficulty.EASY
    mode: Optional[GameMode] = None
    topic: Optional[GrammarTopic] = None


class DrillApp:
    """Top-level context: owns the ledgers, the learner's selection and the live session."""

    def __init__(
        self,
        *,
        client: RetryingClient,
        store: LedgerStore,
        ui_lang: str = "en",
        rng: Optional[random.Random] = None,
    ) -> None:
        self.client = client
        self.store = store
        self.ui_lang = ui_lang
        self._rng = rng
        self.progress = ProgressLedger(store)
        self.history = HistoryLedger(store)
        self.selection = Selection()
        self.screen = Screen.MODE
        self.session: ChallengeSession | None = None

    async def load(self) -> None:
        await self.progress.load()
        await self.history.load()

    @property
    def skill_key(self) -> str | None:
        sel = self.selection
        return derive_skill_key(sel.difficulty, sel.mode, sel.topic)

    @property
    def current_progress(self) -> int:
        key = self.skill_key
        return self.progress.count(key) if key else 0

    def progress_text(self) -> str:
        return t("progress", self.ui_lang).format(current=self.current_progress, total=TOTAL_CHALLENGES)

    def _drop_session(self) -> None:
        if self.session is not None:
            self.session.invalidate()
            self.session = None

    def select_mode(self, mode: GameMode) -> Screen:
        self._drop_session()
        self.selection.mode = mode
        self.selection.topic = None
        self.screen = Screen.ZONE
        return self.screen

    def select_zone(self, difficulty: Difficulty) -> Screen:
        if self.selection.mode is None:
            self.screen = Screen.MODE
            return self.screen
        self._drop_session()
        self.selection.difficulty = difficulty
        self.screen = Screen.TOPIC if requires_topic(self.selection.mode) else Screen.GAME
        return self.screen

    def select_topic(self, topic: GrammarTopic) -> Screen:
        if self.selection.mode is None or not requires_topic(self.selection.mode):
            self.screen = Screen.MODE
            return self.screen
        self._drop_session()
        self.selection.topic = topic
        self.screen = Screen.GAME
        return self.screen

    def back(self) -> Screen:
        mode = self.selection.mode
        if self.screen is Screen.GAME:
            self._drop_session()
            self.screen = Screen.TOPIC if mode is not None and requires_topic(mode) else Screen.ZONE
        elif self.screen is Screen.TOPIC:
            self.screen = Screen.ZONE
        elif self.screen is Screen.ZONE:
            self.screen = Screen.MODE
        return self.screen

    def subheader(self) -> str:
        sel = self.selection
        lang = self.ui_lang
        if self.screen is Screen.MODE or sel.mode is None:
            return t("tagline", lang)
        if self.screen is Screen.ZONE:
            return t("sub_zone", lang).format(mode=sel.mode.label)
        if self.screen is Screen.TOPIC:
            return t("sub_topic", lang).format(mode=sel.mode.label, zone=sel.difficulty.label)
        if sel.topic is not None and requires_topic(sel.mode):
            return t("sub_game_topic", lang).format(zone=sel.difficulty.label, topic=sel.topic.label)
        return t("sub_game", lang).format(zone=sel.difficulty.label)

    async def start_session(self) -> ChallengeSession | None:
        """Replace the live session with a fresh one and load its first challenge."""
        key = self.skill_key
        if key is None or self.screen is not Screen.GAME:
            logger.info("session_start_refused screen=%s skill_key=%s", self.screen.value, key)
            return None
        self._drop_session()
        sel = self.selection
        session = SESSION_TYPES[sel.mode](
            client=self.client,
            progress=self.progress,
            history=self.history,
            skill_key=key,
            difficulty=sel.difficulty,
            topic=sel.topic if requires_topic(sel.mode) else None,
            ui_lang=self.ui_lang,
            rng=self._rng,
        )
        self.session = session
        logger.info("session_start mode=%s skill_key=%s", sel.mode.value, key)
        await session.load()
        return session

    async def reset(self) -> None:
        self._drop_session()
        self.selection = Selection()
        self.screen = Screen.MODE
        await reset_ledgers(self.store, self.progress, self.history)
        logger.info("progress_reset")
