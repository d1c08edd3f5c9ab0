from enum import IntFlag


class PathStatus(IntFlag):
    """Bit-set describing how a working-copy path differs from its base."""

    NONE = 0
    ADDED = 1
    MODIFIED = 2
    DELETED = 4
    UNTRACKED = 8
    EXTERNALS = 16

    @property
    def has_modification(self) -> bool:
        return bool(self & (PathStatus.ADDED | PathStatus.MODIFIED | PathStatus.DELETED))
