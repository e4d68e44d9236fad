# schemas.py
from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class SampleOut(BaseModel):
    text: str
    numbers: list[int]


class EchoOut(BaseModel):
    normal: str
    shouty: str
    char_count: int = Field(serialization_alias="charCount")
    backwards: str

    model_config = ConfigDict(populate_by_name=True)


class ChatMessageIn(BaseModel):
    message: str


class HealthOut(BaseModel):
    ok: bool
    subscribers: int
