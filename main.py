#!/usr/bin/env python3
"""
Entry point for the Calculator application.

    python main.py

Settings come from the environment:
    CALC_ANGLE_MODE     rad (default) or deg
    CALC_HISTORY_LIMIT  number of history entries kept (default 10)
    CALC_LOG_LEVEL      DEBUG, INFO, WARNING (default), ERROR
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Ensure the repo root is on sys.path so backend/ and frontend/ import when run as a script
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from backend.engine import CalculatorEngine
from backend.settings import EngineSettings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_FILE = ROOT / "calculator.log"
HANDLER_NAMES = ("calculator-console", "calculator-file")


def setup_logging(level: str = "WARNING", log_file: Path = LOG_FILE) -> logging.Logger:
    """Configure console and rotating file logging once; later calls only adjust the level."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.WARNING))

    if any(h.get_name() in HANDLER_NAMES for h in root.handlers):
        return root  # already configured

    fmt = logging.Formatter(LOG_FORMAT)

    # Console
    sh = logging.StreamHandler()
    sh.set_name("calculator-console")
    sh.setFormatter(fmt)
    root.addHandler(sh)

    # File next to the application
    fh = RotatingFileHandler(log_file, maxBytes=512_000, backupCount=2, encoding="utf-8")
    fh.set_name("calculator-file")
    fh.setFormatter(fmt)
    root.addHandler(fh)

    return root


def main():
    settings = EngineSettings.from_env()
    setup_logging(settings.log_level)
    logging.getLogger(__name__).info("Starting calculator (angle mode %s)", settings.angle_mode)

    # The GUI needs a display; import it only when actually launching the window
    from frontend.gui import CalculatorGUI

    app = CalculatorGUI(CalculatorEngine(settings))
    app.mainloop()


if __name__ == "__main__":
    main()
