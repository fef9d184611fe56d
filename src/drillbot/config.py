from __future__ import annotations
import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

_UI_LANGS = {"en", "uk"}

@dataclass(frozen=True)
class Settings:
    bot_token: str
    gemini_api_key: str
    database_url: str
    llm_model: str
    ui_lang: str = "en"  # en/uk

def load_settings() -> Settings:
    load_dotenv()
    bot_token = os.getenv("BOT_TOKEN")
    if not bot_token:
        raise RuntimeError("BOT_TOKEN is required")

    gemini_api_key = os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY")
    if not gemini_api_key:
        raise RuntimeError("GOOGLE_API_KEY or GEMINI_API_KEY is required")

    database_url = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./data/drills.db")
    llm_model = os.getenv("LLM_MODEL", "gemini-2.5-flash").strip()
    ui_lang = os.getenv("UI_LANG", "en").strip().lower()
    if ui_lang not in _UI_LANGS:
        raise RuntimeError("UI_LANG must be en or uk")

    return Settings(
        bot_token=bot_token,
        gemini_api_key=gemini_api_key,
        database_url=database_url,
        llm_model=llm_model,
        ui_lang=ui_lang,
    )
