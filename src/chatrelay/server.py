import logging

import uvicorn

from chatrelay.hub import hub

logger = logging.getLogger(__name__)


class RelayServer(uvicorn.Server):
    """uvicorn server that ends open /sse streams as soon as shutdown starts.

    uvicorn waits for connections to drain before running the lifespan
    shutdown, so a listener still attached at that point would keep the
    process alive.
    """

    def handle_exit(self, sig, frame) -> None:
        if not self.should_exit:
            logger.info("Shutting down, closing %d stream(s)", hub.subscriber_count)
            hub.close()
        super().handle_exit(sig, frame)
