from enum import IntEnum


class ChangeKind(IntEnum):
    """What happened to a path. Values are the wire codes the review service expects."""

    ADD = 1
    CHANGE = 2
    DELETE = 3
    MOVE_AWAY = 4
    COPY_AWAY = 5
    MOVE_HERE = 6
    COPY_HERE = 7
    MULTICOPY = 8
    MESSAGE = 9
    CHILD = 10


class FileType(IntEnum):
    """Content classification of a changed path."""

    TEXT = 1
    IMAGE = 2
    BINARY = 3
    DIRECTORY = 4
    SYMLINK = 5
    DELETED = 6
    NORMAL = 7
