from dataclasses import dataclass


@dataclass(eq=False)
class ReviewServiceError(Exception):
    """Raised by review-service bindings when an RPC call fails.

    ``error_code`` is the service's symbolic code (e.g. ``ERR-BAD-ARCANIST-PROJECT``);
    transport failures carry no code and are ``retryable``.
    """

    method: str
    message: str
    error_code: str | None = None
    retryable: bool = False
    status_code: int | None = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        code = f" [{self.error_code}]" if self.error_code else ""
        return f"{self.method}{code}: {self.message}"
