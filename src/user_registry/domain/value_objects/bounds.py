"""Length bounds for user text fields."""

from dataclasses import dataclass


@dataclass(frozen=True)
class LengthBound:
    """Inclusive character-length bound for a text field."""

    minimum: int
    maximum: int

    def __post_init__(self) -> None:
        if self.minimum < 0 or self.maximum < self.minimum:
            raise ValueError(
                f"Invalid bound [{self.minimum}, {self.maximum}]"
            )

    def contains(self, value: str) -> bool:
        """Check whether the value's length falls inside the bound."""
        return self.minimum <= len(value) <= self.maximum

    def __str__(self) -> str:
        return f"[{self.minimum}, {self.maximum}]"


FIRST_NAME_BOUND = LengthBound(minimum=2, maximum=20)
LAST_NAME_BOUND = LengthBound(minimum=2, maximum=20)
BIOGRAPHY_BOUND = LengthBound(minimum=20, maximum=450)
