"""Console entry point: print the live wave status once per tick.

    uv run newyearwave-status
"""

import threading

from dotenv import load_dotenv

load_dotenv()

from newyearwave.config import load_settings  # noqa: E402
from newyearwave.i18n import t  # noqa: E402
from newyearwave.logs import configure_logging  # noqa: E402
from newyearwave.models import WaveSnapshot  # noqa: E402
from newyearwave.ticker import WaveTicker  # noqa: E402
from newyearwave.wave import (  # noqa: E402
    format_countdown,
    format_longitude,
    format_utc,
    status_key,
)


def status_line(snap: WaveSnapshot, lang: str = "en") -> str:
    transition = snap.transition
    parts = [
        format_utc(snap.instant),
        f"midnight {format_longitude(snap.midnight_lon)}",
        f"{transition.coverage_percent:5.1f}%",
        t(status_key(snap), lang),
    ]
    if transition.countdown is not None:
        parts.append(f"starts in {format_countdown(transition.countdown)}")
    return " | ".join(parts)


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level, settings.log_dir)

    ticker = WaveTicker(interval=settings.tick_seconds)
    ticker.subscribe(lambda snap: print(status_line(snap), flush=True))
    stop = threading.Event()
    try:
        ticker.run(stop)
    except KeyboardInterrupt:
        stop.set()


if __name__ == "__main__":
    main()
