from __future__ import annotations
from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder
from .app import DrillApp, Screen
from .i18n import t
from .sessions import ChallengeSession, GrammarChoiceSession, SessionState, WordArrangementSession
from .skills import Difficulty, GameMode, GrammarTopic

CHIPS_PER_ROW = 4

_OPTION_MARKS = {
    "correct": "✅ ",
    "wrong": "❌ ",
    "dimmed": "▫️ ",
    None: "",
}

def _row_sizes(*counts: int, per_row: int = CHIPS_PER_ROW) -> list[int]:
    sizes: list[int] = []
    for count in counts:
        full, rest = divmod(count, per_row)
        sizes.extend([per_row] * full)
        if rest:
            sizes.append(rest)
    return sizes

def kb_modes(ui_lang: str) -> InlineKeyboardMarkup:
    b = InlineKeyboardBuilder()
    for mode in GameMode:
        b.button(text=mode.label, callback_data=f"mode:{mode.value}")
    b.button(text=t("btn_reset", ui_lang), callback_data="reset")
    b.adjust(1)
    return b.as_markup()

def kb_zones(current: Difficulty, ui_lang: str) -> InlineKeyboardMarkup:
    b = InlineKeyboardBuilder()
    for difficulty in Difficulty:
        prefix = "• " if difficulty is current else ""
        b.button(text=prefix + difficulty.label, callback_data=f"zone:{difficulty.value}")
    b.button(text=t("btn_back", ui_lang), callback_data="back")
    b.adjust(1)
    return b.as_markup()

def kb_topics(ui_lang: str) -> InlineKeyboardMarkup:
    b = InlineKeyboardBuilder()
    for topic in GrammarTopic:
        b.button(text=topic.label, callback_data=f"topic:{topic.value}")
    b.button(text=t("btn_back", ui_lang), callback_data="back")
    b.adjust(3, 3, 3, 1)
    return b.as_markup()

def _controls(b: InlineKeyboardBuilder, session: ChallengeSession, ui_lang: str) -> int:
    """Add state-dependent buttons plus back/reset; returns the state-dependent count."""
    gen = session.generation
    buttons = 0
    if session.state is SessionState.ACTIVE:
        if isinstance(session, WordArrangementSession):
            b.button(text=t("btn_check", ui_lang), callback_data=f"check:{gen}")
            buttons += 1
        b.button(text=t("btn_skip", ui_lang), callback_data=f"skip:{gen}")
        buttons += 1
    elif session.state in (SessionState.CORRECT, SessionState.REVEALED):
        b.button(text=t("btn_next", ui_lang), callback_data=f"next:{gen}")
        buttons += 1
    elif session.state is SessionState.ERROR:
        b.button(text=t("btn_retry", ui_lang), callback_data=f"retry:{gen}")
        buttons += 1
    b.button(text=t("btn_back", ui_lang), callback_data="back")
    b.button(text=t("btn_reset", ui_lang), callback_data="reset")
    return buttons

def kb_word_session(session: WordArrangementSession, ui_lang: str) -> InlineKeyboardMarkup:
    b = InlineKeyboardBuilder()
    gen = session.generation
    assembled: tuple[str, ...] = ()
    pool: tuple[str, ...] = ()
    if session.engine is not None and session.state is SessionState.ACTIVE:
        assembled = session.engine.assembled
        pool = session.engine.pool
        for idx, word in enumerate(assembled):
            b.button(text=f"[{word}]", callback_data=f"ans:{gen}:{idx}")
        for idx, word in enumerate(pool):
            b.button(text=word, callback_data=f"pool:{gen}:{idx}")
    sizes = _row_sizes(len(assembled), len(pool))
    if assembled:
        b.button(text=t("btn_clear", ui_lang), callback_data=f"clear:{gen}")
        sizes.append(1)
    main = _controls(b, session, ui_lang)
    sizes.extend(_row_sizes(main, per_row=2))
    sizes.append(2)  # back + reset
    b.adjust(*sizes)
    return b.as_markup()

def kb_grammar_session(session: GrammarChoiceSession, ui_lang: str) -> InlineKeyboardMarkup:
    b = InlineKeyboardBuilder()
    gen = session.generation
    sizes: list[int] = []
    if session.challenge is not None:
        for idx, option in enumerate(session.challenge.options):
            mark = _OPTION_MARKS[session.option_status(option)]
            b.button(text=mark + option, callback_data=f"opt:{gen}:{idx}")
        sizes = _row_sizes(len(session.challenge.options), per_row=2)
    main = _controls(b, session, ui_lang)
    sizes.extend(_row_sizes(main, per_row=2))
    sizes.append(2)  # back + reset
    b.adjust(*sizes)
    return b.as_markup()

def kb_loading(ui_lang: str) -> InlineKeyboardMarkup:
    b = InlineKeyboardBuilder()
    b.button(text=t("btn_back", ui_lang), callback_data="back")
    b.adjust(1)
    return b.as_markup()

def kb_for_screen(app: DrillApp) -> InlineKeyboardMarkup:
    lang = app.ui_lang
    if app.screen is Screen.MODE:
        return kb_modes(lang)
    if app.screen is Screen.ZONE:
        return kb_zones(app.selection.difficulty, lang)
    if app.screen is Screen.TOPIC:
        return kb_topics(lang)
    session = app.session
    if isinstance(session, WordArrangementSession):
        return kb_word_session(session, lang)
    if isinstance(session, GrammarChoiceSession):
        return kb_grammar_session(session, lang)
    return kb_loading(lang)
