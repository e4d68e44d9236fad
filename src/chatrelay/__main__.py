import logging

import uvicorn

from chatrelay.log import configure_logging
from chatrelay.server import RelayServer
from chatrelay.settings import settings

logger = logging.getLogger("chatrelay")


def main() -> None:
    configure_logging(settings.log_level)
    logger.info("Listening on port %d", settings.port)
    config = uvicorn.Config(
        "chatrelay.app:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
        log_level=settings.log_level.lower(),
    )
    RelayServer(config).run()


if __name__ == "__main__":
    main()
