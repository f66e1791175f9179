from dataclasses import dataclass

from world_weaver.settings import MESSAGE_DURATION


@dataclass
class Message:
    text: str
    time: float


class MessageLog:
    """Transient notifications shown at the top of the screen."""

    def __init__(self):
        self.messages: list[Message] = []

    def add(self, text: str, duration: float = MESSAGE_DURATION) -> None:
        self.messages.append(Message(text=text, time=duration))

    def tick(self, dt: float) -> None:
        for msg in self.messages:
            msg.time -= dt
        self.messages = [m for m in self.messages if m.time > 0]

    def texts(self) -> list[str]:
        return [m.text for m in self.messages]

    def __contains__(self, text: str) -> bool:
        return any(m.text == text for m in self.messages)

    def __len__(self) -> int:
        return len(self.messages)
