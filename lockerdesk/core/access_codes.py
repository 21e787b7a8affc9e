from __future__ import annotations

import random
import secrets
from typing import Callable

from lockerdesk.core.errors import ResourceExhaustedError

ACCESS_CODE_MIN = 100000
ACCESS_CODE_MAX = 999999
DEFAULT_MAX_ATTEMPTS = 10


class AccessCodeGenerator:
    """
    Draws 6-digit access codes, re-rolling on collision with a code that is
    currently assigned anywhere in the pool.
    """

    def __init__(self, *, max_attempts: int = DEFAULT_MAX_ATTEMPTS, rng: random.Random | None = None) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._max_attempts = max_attempts
        self._rng = rng or secrets.SystemRandom()

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def roll(self) -> str:
        return str(self._rng.randint(ACCESS_CODE_MIN, ACCESS_CODE_MAX))

    def generate(self, is_taken: Callable[[str], bool]) -> str:
        for _ in range(self._max_attempts):
            code = self.roll()
            if not is_taken(code):
                return code
        raise ResourceExhaustedError("Failed to generate unique access code")
