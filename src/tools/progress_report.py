import argparse
import asyncio
import json
import sys
from src.drillbot.config import load_settings
from src.drillbot.db import ensure_schema, make_engine, make_sessionmaker
from src.drillbot.ledgers import HistoryLedger, LedgerStore, ProgressLedger, reset_ledgers
from src.drillbot.skills import describe_skill_key

def _render(progress: dict[str, int], history: dict[str, list[str]]) -> str:
    keys = sorted(set(progress) | set(history))
    if not keys:
        return "No progress recorded."
    lines: list[str] = []
    for key in keys:
        lines.append(f"{describe_skill_key(key)} [{key}]")
        lines.append(f"  completed: {progress.get(key, 0)}")
        lines.append(f"  issued: {len(history.get(key, []))}")
    return "\n".join(lines)

async def main(argv: list[str]) -> int:
    parser = argparse.ArgumentParser(description="Show or reset the drill progress ledgers.")
    parser.add_argument("--reset", action="store_true", help="erase progress and history")
    parser.add_argument("--json", action="store_true", help="print raw ledgers as JSON")
    args = parser.parse_args(argv)

    settings = load_settings()
    engine = make_engine(settings)
    try:
        await ensure_schema(engine)
        store = LedgerStore(make_sessionmaker(engine))
        progress = ProgressLedger(store)
        history = HistoryLedger(store)
        await progress.load()
        await history.load()

        if args.reset:
            await reset_ledgers(store, progress, history)
            print("Ledgers reset.")
            return 0

        if args.json:
            print(json.dumps(
                {"progress": progress.snapshot(), "history": history.snapshot()},
                ensure_ascii=False,
                indent=2,
            ))
        else:
            print(_render(progress.snapshot(), history.snapshot()))
        return 0
    finally:
        await engine.dispose()

if __name__ == "__main__":
    raise SystemExit(asyncio.run(main(sys.argv[1:])))
