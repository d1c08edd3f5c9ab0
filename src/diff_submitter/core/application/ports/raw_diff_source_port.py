from abc import ABC, abstractmethod


class RawDiffSourcePort(ABC):
    @abstractmethod
    async def read_diff(self) -> bytes:
        """Return a diff produced outside the working copy (stdin or a command)."""
