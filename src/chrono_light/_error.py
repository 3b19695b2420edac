from __future__ import annotations

from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from ._types import DateField

ChronoErrorKind = Literal["underflow", "range", "parse", "schedule", "codec"]


class ChronoError(Exception):
    kind: ChronoErrorKind
    field: DateField | None

    def __init__(
        self,
        kind: ChronoErrorKind,
        message: str,
        field: DateField | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.field = field

    @classmethod
    def underflow(cls, message: str, field: DateField | None = None) -> ChronoError:
        """A field below its minimum (month/day 0, negative time fields)."""
        return cls("underflow", message, field)

    @classmethod
    def range(cls, message: str, field: DateField | None = None) -> ChronoError:
        return cls("range", message, field)

    @classmethod
    def parse(cls, message: str) -> ChronoError:
        return cls("parse", message)

    @classmethod
    def schedule(cls, message: str) -> ChronoError:
        return cls("schedule", message)

    @classmethod
    def codec(cls, message: str) -> ChronoError:
        return cls("codec", message)

    def display_rich(self) -> str:
        if self.field is not None:
            return f"error[{self.kind}]: {self} (field: {self.field})"
        return f"error[{self.kind}]: {self}"
