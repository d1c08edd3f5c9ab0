from abc import ABC, abstractmethod


class UserInteractionPort(ABC):
    """Blocking user decisions. Every call returns only after the user answers."""

    @abstractmethod
    def confirm(self, prompt: str, default: bool = False) -> bool: ...

    @abstractmethod
    def edit(self, text: str, name: str) -> str:
        """Open ``text`` in an editor and return what the user saved."""

    @abstractmethod
    def prompt(self, question: str) -> str: ...

    @abstractmethod
    def notify(self, text: str) -> None:
        """Show information the user needs before a decision."""
