from chatrelay.schemas import EchoOut
from chatrelay.schemas import SampleOut


def sample() -> SampleOut:
    return SampleOut(text="hi", numbers=[1, 2, 3])


def echo(value: str) -> EchoOut:
    return EchoOut(
        normal=value,
        shouty=value.upper(),
        char_count=len(value),
        backwards=value[::-1],
    )
