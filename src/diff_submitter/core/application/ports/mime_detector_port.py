from abc import ABC, abstractmethod


class MimeDetectorPort(ABC):
    @abstractmethod
    async def detect(self, payload: bytes) -> str:
        """Return the MIME type of ``payload``."""
