from __future__ import annotations

import logging
import sys
from datetime import datetime
from typing import Iterable, Sequence, TextIO

from organizer.core.event_store import EventStore
from organizer.core.quick_add import render_preview, submit_quick_add
from organizer.infra.config import Settings, load_settings
from organizer.infra.logging_config import configure_logging

LOGGER = logging.getLogger(__name__)


def run(lines: Iterable[str], settings: Settings, *, out: TextIO) -> int:
    today = datetime.now(settings.timezone).date()
    store = EventStore(
        max_notifications=settings.max_notifications,
        default_type=settings.default_event_type,
        today_provider=lambda: today,
    )
    failures = 0
    for line in lines:
        text = line.strip()
        if not text:
            continue
        result = submit_quick_add(text, store, today=today, require_start=settings.require_start_time)
        print(render_preview(result.preview), file=out)
        print(f"{result.title}: {result.message}", file=out)
        print("", file=out)
        if result.status != "ok":
            failures += 1
    LOGGER.info("cli.done events=%s failures=%s", len(store.events), failures)
    return 1 if failures else 0


def main(argv: Sequence[str] | None = None) -> int:
    configure_logging()
    settings = load_settings()
    args = list(sys.argv[1:] if argv is None else argv)
    lines: Iterable[str] = args if args else sys.stdin
    return run(lines, settings, out=sys.stdout)


if __name__ == "__main__":
    sys.exit(main())
