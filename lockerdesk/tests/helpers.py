from __future__ import annotations

from lockerdesk.core.entities.identity import Identity, IdentityKind
from lockerdesk.core.entities.notification import Notification


def student(student_id: str = "student-a", email: str = "a@uni.test") -> Identity:
    return Identity(kind=IdentityKind.STUDENT, id=student_id, email=email)


def operator() -> Identity:
    return Identity(kind=IdentityKind.OPERATOR, id="library", email="library@lockerdesk.local")


def event_types(events: list[Notification]) -> list[str]:
    return [e.type.value for e in events]
