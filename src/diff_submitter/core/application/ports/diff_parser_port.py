from abc import ABC, abstractmethod

from diff_submitter.core.domain.change import Change


class DiffParserPort(ABC):
    @abstractmethod
    def parse(self, diff: bytes) -> list[Change]:
        """Turn raw diff text into structured changes."""
