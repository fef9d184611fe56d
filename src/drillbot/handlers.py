from __future__ import annotations
import logging
from enum import Enum
from typing import TypeVar

from aiogram import Dispatcher, F
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command, CommandStart
from aiogram.types import CallbackQuery, Message
from aiogram.utils.formatting import Bold, Italic, Text

from .app import DrillApp, Screen
from .arrangement import Zone
from .config import Settings
from .i18n import t
from .keyboards import kb_for_screen, kb_loading
from .sessions import (
    ChallengeSession,
    Feedback,
    GrammarChoiceSession,
    NothingAssembled,
    SessionState,
    SessionStateError,
    WordArrangementSession,
)
from .skills import Difficulty, GameMode, GrammarTopic, describe_skill_key

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

_FEEDBACK_ICONS = {"correct": "🎉 ", "incorrect": "💡 "}

# ---------------- rendering ----------------
def _parse_enum(enum_cls: type[E], raw: str) -> E | None:
    try:
        return enum_cls(raw)
    except ValueError:
        return None

def _feedback_part(feedback: Feedback) -> Text | None:
    if feedback.kind == "none" or not feedback.message:
        return None
    return Text(_FEEDBACK_ICONS.get(feedback.kind, ""), feedback.message)

def _word_body(session: WordArrangementSession, lang: str) -> list[object]:
    parts: list[object] = []
    assembled = session.engine.assembled if session.engine else ()
    sentence = " ".join(assembled) if assembled else t("empty_sentence", lang)
    parts.extend([Bold(t("your_sentence", lang)), " ", sentence])
    if session.state is SessionState.ACTIVE and session.engine is not None:
        parts.extend(["\n", Bold(t("jumbled_words", lang)), " ", " · ".join(session.engine.pool)])
    return parts

def _grammar_body(session: GrammarChoiceSession, lang: str) -> list[object]:
    challenge = session.challenge
    return [
        Bold(t("find_error", lang)),
        "\n",
        challenge.sentence_with_error,
        "\n",
        Italic(t("topic", lang).format(topic=session.topic.label)),
    ]

def _session_parts(session: ChallengeSession | None, lang: str) -> list[object]:
    if session is None or session.state is SessionState.LOADING:
        return [t("loading", lang)]
    if session.state is SessionState.ERROR:
        return ["⚠️ ", session.error_message or t("error_word", lang)]
    if isinstance(session, WordArrangementSession):
        parts = _word_body(session, lang)
    else:
        parts = _grammar_body(session, lang)
    feedback = _feedback_part(session.feedback)
    if feedback is not None:
        parts.extend(["\n\n", feedback])
    return parts

def build_screen_message(app: DrillApp, *, loading: bool = False) -> dict[str, object]:
    lang = app.ui_lang
    parts: list[object] = [Bold(t("title", lang)), "\n", app.subheader()]
    if app.screen is Screen.MODE:
        parts.extend(["\n\n", t("choose_mode", lang)])
    elif app.screen is Screen.ZONE:
        parts.extend(["\n\n", t("choose_zone", lang)])
    elif app.screen is Screen.TOPIC:
        parts.extend(["\n\n", t("choose_topic", lang)])
    else:
        parts.extend(["\n", Italic(app.progress_text()), "\n\n"])
        parts.extend(_session_parts(None if loading else app.session, lang))
    return Text(*parts).as_kwargs()

def build_progress_message(app: DrillApp) -> dict[str, object]:
    lang = app.ui_lang
    counts = app.progress.snapshot()
    if not counts:
        return Text(t("progress_empty", lang)).as_kwargs()
    lines: list[object] = [Bold(t("progress_header", lang))]
    for key, count in sorted(counts.items()):
        lines.extend(["\n", f"{describe_skill_key(key)}: {count}"])
    return Text(*lines).as_kwargs()

async def _show(m: Message, app: DrillApp, *, loading: bool = False) -> None:
    markup = kb_loading(app.ui_lang) if loading else kb_for_screen(app)
    try:
        await m.edit_text(**build_screen_message(app, loading=loading), reply_markup=markup)
    except TelegramBadRequest as exc:
        # "message is not modified" when a tap changes nothing visible
        logger.debug("edit_skipped err=%s", exc)

async def _send_screen(m: Message, app: DrillApp) -> None:
    await m.answer(**build_screen_message(app), reply_markup=kb_for_screen(app))

async def _load_and_show(m: Message, app: DrillApp) -> None:
    """Show the loading state, run the fetch, then show whatever is current."""
    await _show(m, app, loading=True)
    session = await app.start_session()
    if session is not None and app.session is not session:
        # superseded by a newer session while the fetch was running
        return
    await _show(m, app)

def _split_game_data(data: str) -> tuple[str, int | None, int | None]:
    parts = (data or "").split(":")
    action = parts[0]
    gen = int(parts[1]) if len(parts) > 1 and parts[1].isdigit() else None
    idx = int(parts[2]) if len(parts) > 2 and parts[2].isdigit() else None
    return action, gen, idx

# ---------------- registration ----------------
def register_handlers(dp: Dispatcher, *, settings: Settings, app: DrillApp):
    lang = settings.ui_lang

    @dp.message(CommandStart())
    async def on_start(m: Message):
        await _send_screen(m, app)

    @dp.message(Command("reset"))
    async def on_reset(m: Message):
        await app.reset()
        await m.answer(t("progress_reset", lang))
        await _send_screen(m, app)

    @dp.message(Command("progress"))
    async def on_progress(m: Message):
        await m.answer(**build_progress_message(app))

    @dp.message(Command("move"))
    async def on_move(m: Message):
        args = (m.text or "").split()[1:]
        session = app.session
        if len(args) != 2 or not all(a.isdigit() for a in args):
            await m.answer(t("move_usage", lang))
            return
        if not isinstance(session, WordArrangementSession):
            await m.answer(t("action_unavailable", lang))
            return
        try:
            moved = session.move(Zone.ASSEMBLED, int(args[0]) - 1, int(args[1]) - 1)
        except SessionStateError:
            moved = False
        if not moved:
            await m.answer(t("action_unavailable", lang))
            return
        await _send_screen(m, app)

    @dp.callback_query(F.data.startswith("mode:"))
    async def on_mode(cb: CallbackQuery):
        mode = _parse_enum(GameMode, cb.data.split(":", 1)[1])
        if mode is None:
            await cb.answer(t("action_unavailable", lang))
            return
        app.select_mode(mode)
        await cb.answer()
        await _show(cb.message, app)

    @dp.callback_query(F.data.startswith("zone:"))
    async def on_zone(cb: CallbackQuery):
        difficulty = _parse_enum(Difficulty, cb.data.split(":", 1)[1])
        if difficulty is None:
            await cb.answer(t("action_unavailable", lang))
            return
        screen = app.select_zone(difficulty)
        await cb.answer()
        if screen is Screen.GAME:
            await _load_and_show(cb.message, app)
        else:
            await _show(cb.message, app)

    @dp.callback_query(F.data.startswith("topic:"))
    async def on_topic(cb: CallbackQuery):
        topic = _parse_enum(GrammarTopic, cb.data.split(":", 1)[1])
        if topic is None:
            await cb.answer(t("action_unavailable", lang))
            return
        screen = app.select_topic(topic)
        await cb.answer()
        if screen is Screen.GAME:
            await _load_and_show(cb.message, app)
        else:
            await _show(cb.message, app)

    @dp.callback_query(F.data == "back")
    async def on_back(cb: CallbackQuery):
        app.back()
        await cb.answer()
        await _show(cb.message, app)

    @dp.callback_query(F.data == "reset")
    async def on_reset_cb(cb: CallbackQuery):
        await app.reset()
        await cb.answer(t("progress_reset", lang))
        await _show(cb.message, app)

    @dp.callback_query(F.data.regexp(r"^(skip|next|retry):\d+$"))
    async def on_reload(cb: CallbackQuery):
        action, gen, _ = _split_game_data(cb.data)
        session = app.session
        if session is None or gen != session.generation:
            await cb.answer(t("stale_button", lang))
            return
        reload = {"skip": session.skip, "next": session.next, "retry": session.retry}[action]
        await cb.answer()
        await _show(cb.message, app, loading=True)
        try:
            await reload()
        except SessionStateError as exc:
            logger.info("session_action_refused action=%s err=%s", action, exc)
        if app.session is not session:
            return
        await _show(cb.message, app)

    @dp.callback_query(F.data.regexp(r"^(pool|ans|clear|check|opt):\d+(:\d+)?$"))
    async def on_game_action(cb: CallbackQuery):
        action, gen, idx = _split_game_data(cb.data)
        session = app.session
        if session is None or gen != session.generation:
            await cb.answer(t("stale_button", lang))
            return
        try:
            if isinstance(session, WordArrangementSession):
                await _word_action(session, action, idx)
            elif isinstance(session, GrammarChoiceSession) and action == "opt" and idx is not None:
                await session.select_index(idx)
            else:
                raise ValueError(f"unsupported action: {action}")
        except NothingAssembled:
            await cb.answer(t("nothing_assembled", lang))
            return
        except SessionStateError as exc:
            logger.info("session_action_refused action=%s err=%s", action, exc)
            await cb.answer(t("action_unavailable", lang))
            return
        except ValueError as exc:
            logger.info("session_action_invalid action=%s err=%s", action, exc)
            await cb.answer(t("action_unavailable", lang))
            return
        await cb.answer()
        await _show(cb.message, app)

async def _word_action(session: WordArrangementSession, action: str, idx: int | None) -> None:
    if action == "pool" and idx is not None:
        session.place(idx)
    elif action == "ans" and idx is not None:
        session.unplace(idx)
    elif action == "clear":
        session.clear()
    elif action == "check":
        await session.check_answer()
    else:
        raise ValueError(f"unsupported word action: {action}")
