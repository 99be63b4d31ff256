import sys
import logging

import setproctitle

from src.local import app_globals
from src.log.setup import setup_logging
from src.desktop import run_desktop

log = logging.getLogger(__name__)


def main() -> None:
    """The main entry point for the desktop application."""
    setproctitle.setproctitle(app_globals.PROCESS_TITLE)

    console_level = logging.DEBUG if "--verbose" in sys.argv[1:] else logging.INFO
    setup_logging(console_level)

    log.info("=" * 20 + f" {app_globals.APP_NAME} Desktop Starting " + "=" * 20)
    run_desktop()
    log.info("Desktop shell closed.")


if __name__ == "__main__":
    main()
