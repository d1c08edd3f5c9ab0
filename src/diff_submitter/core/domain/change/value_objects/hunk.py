"""One contiguous diffed region of a file."""

from dataclasses import dataclass


@dataclass(kw_only=True)
class Hunk:
    """A hunk keeps its corpus as raw bytes so encoding problems survive parsing.

    The corpus is the literal diff body (``" "``, ``"+"``, ``"-"`` prefixed lines)
    and may be rewritten in place by the encoding conversion step.
    """

    corpus: bytes
    old_offset: int = 0
    old_length: int = 0
    new_offset: int = 0
    new_length: int = 0

    @property
    def byte_size(self) -> int:
        return len(self.corpus)

    def is_valid_utf8(self) -> bool:
        try:
            self.corpus.decode("utf-8")
        except UnicodeDecodeError:
            return False
        return True

    def looks_binary(self) -> bool:
        """Heuristic binary check: text diffs never carry NUL bytes."""
        return b"\x00" in self.corpus

    def count_lines(self, prefix: bytes) -> int:
        return sum(1 for line in self.corpus.splitlines() if line.startswith(prefix))

    def to_dictionary(self) -> dict[str, object]:
        return {
            "oldOffset": self.old_offset,
            "oldLength": self.old_length,
            "newOffset": self.new_offset,
            "newLength": self.new_length,
            "addLines": self.count_lines(b"+"),
            "delLines": self.count_lines(b"-"),
            "corpus": self.corpus.decode("utf-8", errors="replace"),
        }
