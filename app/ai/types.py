from dataclasses import dataclass
from typing import Literal, Protocol


Role = Literal["system", "user", "assistant"]


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str


class LLMGateway(Protocol):
    """Prompt in, raw model text out.

    Implementations raise ``UpstreamError`` on transport or auth failures and
    do not retry beyond what their SDK is configured to do.
    """

    async def send(self, prompt: str) -> str: ...
