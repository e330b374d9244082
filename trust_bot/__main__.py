"""Entry point: python -m trust_bot"""

import logging
import os

from .runner import BotConfig, BotRunner


def main():
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    BotRunner(config=BotConfig.from_env()).start()


if __name__ == "__main__":
    main()
