"""Command-line entry point: load configuration and run the bot with long polling."""

import argparse
import sys
from typing import List, Optional

from .config import Config
from .errors import ConfigurationError
from .logging_utils import log_error, log_info
from .telegram_transport import build_application


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="listbot",
        description="Telegram bot managing lists as inline button grids",
    )
    parser.add_argument("--token", help="Bot token (overrides TELEGRAM_BOT_TOKEN)")
    parser.add_argument("--bot-name", help="Bot username for /command@name (overrides LISTBOT_BOT_NAME)")
    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Print the effective configuration and exit",
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    if args.token:
        Config.TELEGRAM_BOT_TOKEN = args.token
    if args.bot_name:
        Config.BOT_NAME = args.bot_name

    if args.show_config:
        print(Config.display())
        return 0

    try:
        Config.validate()
    except ConfigurationError as exc:
        log_error(str(exc))
        return 1

    log_info("Starting listbot...")
    log_info(Config.display())
    application = build_application(
        Config.TELEGRAM_BOT_TOKEN,
        bot_name=Config.BOT_NAME,
        catalog=Config.CATALOG,
        default_list_name=Config.DEFAULT_LIST_NAME,
    )
    application.run_polling()
    log_info("Closing bot... Goodbye!")
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
