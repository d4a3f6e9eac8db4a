from collections.abc import Iterator
from dataclasses import dataclass

BASE = "base"


@dataclass(frozen=True, slots=True)
class ValidationError:
    attribute: str
    message: str

    @property
    def full_message(self) -> str:
        if self.attribute == BASE:
            return self.message
        return f"{self.attribute.replace('_', ' ').capitalize()} {self.message}"


class ValidationErrors:
    """Ordered collection of validation errors, grouped by attribute."""

    def __init__(self) -> None:
        self._errors: list[ValidationError] = []

    def add(self, attribute: str, message: str) -> ValidationError:
        error = ValidationError(attribute=attribute, message=message)
        self._errors.append(error)
        return error

    def clear(self) -> None:
        self._errors.clear()

    def __getitem__(self, attribute: str) -> list[str]:
        return [error.message for error in self._errors if error.attribute == attribute]

    def __iter__(self) -> Iterator[ValidationError]:
        return iter(tuple(self._errors))

    def __len__(self) -> int:
        return len(self._errors)

    def __bool__(self) -> bool:
        return bool(self._errors)

    @property
    def full_messages(self) -> list[str]:
        return [error.full_message for error in self._errors]

    def to_dict(self) -> dict[str, list[str]]:
        grouped: dict[str, list[str]] = {}
        for error in self._errors:
            grouped.setdefault(error.attribute, []).append(error.message)
        return grouped
