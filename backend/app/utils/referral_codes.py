"""
Referral code generation.

Codes are drawn from an alphabet without look-alike characters (0/O, 1/I/L) so
they can be read aloud and typed from print. Uniqueness is checked through an
injected async `code_exists` callable; the check is read-then-write, so two
concurrent issuers can in principle draw the same code.
"""

import logging
import random
import secrets
import unicodedata
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

REFERRAL_CODE_ALPHABET = "ABCDEFGHJKMNPQRSTUVWXYZ23456789"
DEFAULT_CODE_LENGTH = 8
DEFAULT_MAX_ATTEMPTS = 10
FALLBACK_EXTRA_LENGTH = 2
FALLBACK_PREFIX = "REF"

CodeExists = Callable[[str], Awaitable[bool]]


class ReferralCodeExhaustedError(ValueError):
    """Raised when no unused code could be drawn, even at the fallback length."""


def build_name_prefix(name: Optional[str]) -> str:
    """
    Personalised prefix from the first letters of a name.

    Diacritics are stripped ("Šárka" -> "SARK"); up to 4 letters are used. Names
    yielding fewer than 3 letters get "REF".
    """
    if not name:
        return FALLBACK_PREFIX
    normalized = unicodedata.normalize("NFKD", name)
    letters = [ch for ch in normalized if ch.isascii() and ch.isalpha()]
    if len(letters) < 3:
        return FALLBACK_PREFIX
    return "".join(letters[:4]).upper()


class ReferralCodeGenerator:
    """Issues collision-checked referral codes."""

    def __init__(
        self,
        code_exists: CodeExists,
        rng: Optional[random.Random] = None,
        alphabet: str = REFERRAL_CODE_ALPHABET,
    ):
        self.code_exists = code_exists
        self.rng = rng or secrets.SystemRandom()
        self.alphabet = alphabet

    def random_code(self, length: int, prefix: str = "") -> str:
        """Prefix plus `length - len(prefix)` random characters (at least one)."""
        random_length = max(length - len(prefix), 1)
        return prefix + "".join(self.rng.choice(self.alphabet) for _ in range(random_length))

    async def _draw_unused(self, length: int, prefix: str, max_attempts: int) -> Optional[str]:
        for _ in range(max_attempts):
            code = self.random_code(length, prefix)
            if not await self.code_exists(code):
                return code
        return None

    async def generate_unique_code(
        self,
        prefix: str = "",
        length: int = DEFAULT_CODE_LENGTH,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> str:
        """
        Draw an unused code of `length` characters, retrying up to `max_attempts`.

        After exhausting the attempts, codes of `length + 2` are drawn, still
        checked against storage, for up to `max_attempts` more tries.

        Raises:
            ReferralCodeExhaustedError: if every draw collided.
        """
        prefix = (prefix or "").upper()
        code = await self._draw_unused(length, prefix, max_attempts)
        if code is not None:
            return code

        fallback_length = length + FALLBACK_EXTRA_LENGTH
        logger.warning(
            "Referral code space crowded, falling back to longer codes",
            extra={"prefix": prefix, "length": length, "fallback_length": fallback_length},
        )
        code = await self._draw_unused(fallback_length, prefix, max_attempts)
        if code is not None:
            return code

        raise ReferralCodeExhaustedError(
            f"Could not generate a unique referral code after {max_attempts * 2} attempts"
        )

    async def generate_personalized_code(
        self,
        name: Optional[str],
        length: int = DEFAULT_CODE_LENGTH,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> str:
        """Unique code prefixed with letters of `name`."""
        return await self.generate_unique_code(
            prefix=build_name_prefix(name),
            length=length,
            max_attempts=max_attempts,
        )
