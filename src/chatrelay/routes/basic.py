import air
from air.responses import JSONResponse
from fastapi import APIRouter
from fastapi import Query
from fastapi.responses import PlainTextResponse

from chatrelay import text

router = APIRouter(tags=["basic"])


@router.get("/text")
def respond_text():
    return PlainTextResponse("hi")


@router.get("/json")
def respond_json():
    return JSONResponse(text.sample().model_dump())


@router.get("/echo")
def respond_echo(request: air.Request, value: str = Query("", alias="input")):
    """Mirrors `input` back in a few shapes."""
    return JSONResponse(text.echo(value).model_dump(by_alias=True))
