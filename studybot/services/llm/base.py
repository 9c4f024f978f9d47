from __future__ import annotations
from abc import ABC, abstractmethod


class LLMClient(ABC):
    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """
        Single-turn generation: the prompt is sent as the only content.
        Raises UpstreamError when the provider answers with a non-success status.
        """
        raise NotImplementedError
