import asyncio
import logging
from aiogram import Bot, Dispatcher
from .app import DrillApp
from .config import load_settings
from .db import ensure_schema, make_engine, make_sessionmaker
from .generator import RetryingClient
from .handlers import register_handlers
from .ledgers import LedgerStore
from .llm import LLMClient

async def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = load_settings()
    bot = Bot(settings.bot_token)
    engine = make_engine(settings)
    try:
        await ensure_schema(engine)
        sessionmaker = make_sessionmaker(engine)

        client = RetryingClient(LLMClient(settings.gemini_api_key, model=settings.llm_model))
        app = DrillApp(client=client, store=LedgerStore(sessionmaker), ui_lang=settings.ui_lang)
        await app.load()

        dp = Dispatcher()
        register_handlers(dp, settings=settings, app=app)

        await dp.start_polling(bot)
    except Exception:
        logging.getLogger(__name__).exception("bot_run_failed")
        raise
    finally:
        await bot.session.close()
        await engine.dispose()

if __name__ == "__main__":
    asyncio.run(main())
