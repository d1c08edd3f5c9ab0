class RepositoryError(Exception):
    """Raised by version-control bindings when an underlying command fails."""

    def __init__(self, command: str, message: str, exit_code: int | None = None) -> None:
        super().__init__(f"{command}: {message}")
        self.command = command
        self.message = message
        self.exit_code = exit_code
