from abc import ABC, abstractmethod
from typing import Generic, TypeVar

T_Input = TypeVar("T_Input")
T_Output = TypeVar("T_Output")


class BaseSkill(ABC, Generic[T_Input, T_Output]):
    """Abstract base for one typed step of the submission pipeline."""

    @abstractmethod
    async def execute(self, input_data: T_Input) -> T_Output:
        """Run the step and return its typed result."""
