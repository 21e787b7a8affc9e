from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class IdentityKind(str, Enum):
    STUDENT = "student"
    OPERATOR = "operator"


@dataclass(frozen=True, slots=True)
class Identity:
    kind: IdentityKind
    id: str
    email: str

    @property
    def is_operator(self) -> bool:
        return self.kind is IdentityKind.OPERATOR

    @property
    def label(self) -> str:
        return self.email or self.id
