from dataclasses import dataclass


@dataclass(frozen=True)
class CommitCandidate:
    """One commit from local history whose message may become the review message."""

    commit_hash: str
    message: str

    @property
    def short_hash(self) -> str:
        return self.commit_hash[:7]
