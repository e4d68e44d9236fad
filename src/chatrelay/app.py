import logging
from contextlib import asynccontextmanager
from pathlib import Path

import air
from air.responses import JSONResponse
from starlette.staticfiles import StaticFiles

from chatrelay.errors import register_exception_handlers
from chatrelay.hub import hub
from chatrelay.routes.basic import router as basic_router
from chatrelay.routes.chat import router as chat_router
from chatrelay.schemas import HealthOut
from chatrelay.settings import settings

BASE_DIR = Path(__file__).resolve().parent
jinja = air.JinjaRenderer(directory=str(BASE_DIR / "templates"))

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    logger.info("Chat relay starting (%s)", settings.environment)
    try:
        yield
    finally:
        # Ends every open /sse stream
        hub.close()


app = air.Air(lifespan=lifespan)
register_exception_handlers(app)

app.include_router(basic_router)
app.include_router(chat_router)


@app.get("/")
def chat_page(request: air.Request):
    return jinja(request, name="chat.html")


@app.get("/healthz")
def healthz():
    return JSONResponse(HealthOut(ok=True, subscribers=hub.subscriber_count).model_dump())


# Mounted last so it only sees paths no route claimed
if settings.public_dir.exists():
    app.mount("/", StaticFiles(directory=str(settings.public_dir)), name="public")
