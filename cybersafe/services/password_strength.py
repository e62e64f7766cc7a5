"""
Password strength evaluation.

`evaluate` is the canonical scorer: five requirements worth 20 points each, bucketed into
five labels. It is pure and total, so it is safe to call on every debounced keystroke.

`evaluate_weighted` is the older bonus/penalty model used for practice feedback. It is kept
as a separate scorer and never feeds challenge grading.
"""

import re
from dataclasses import dataclass

from cybersafe.utils.errors import ValidationError
from cybersafe.utils.logger import configure_logging

logger = configure_logging()

MIN_LENGTH = 12
POINTS_PER_REQUIREMENT = 20
STRONG_THRESHOLD = 80

COMMON_TOKENS = (
    "password",
    "123456",
    "qwerty",
    "admin",
    "letmein",
    "welcome",
    "abc123",
    "iloveyou",
    "111111",
)

# Undo the usual character swaps before checking the blocklist.
_LEET = str.maketrans({
    "@": "a",
    "4": "a",
    "0": "o",
    "1": "i",
    "!": "i",
    "3": "e",
    "$": "s",
    "5": "s",
    "7": "t",
})

_UPPER = re.compile(r"[A-Z]")
_LOWER = re.compile(r"[a-z]")
_DIGIT = re.compile(r"[0-9]")
_SPECIAL = re.compile(r"[^A-Za-z0-9]")

# (upper bound exclusive, label), checked in order
STRENGTH_BUCKETS = (
    (20, "Very Weak"),
    (40, "Weak"),
    (60, "Moderate"),
    (80, "Strong"),
)
TOP_LABEL = "Very Strong"


@dataclass(frozen=True)
class Requirements:
    length: bool = False
    uppercase: bool = False
    lowercase: bool = False
    number: bool = False
    special: bool = False
    not_common: bool = False

    def scored(self) -> tuple[bool, ...]:
        """The five checks that carry points. `not_common` is advisory only."""
        return (self.length, self.uppercase, self.lowercase, self.number, self.special)


@dataclass(frozen=True)
class PasswordAssessment:
    requirements: Requirements
    strength: int
    strength_text: str


def is_common(password: str) -> bool:
    lowered = password.lower()
    candidates = {lowered, lowered.translate(_LEET)}
    return any(token in candidate for token in COMMON_TOKENS for candidate in candidates)


def check_requirements(password: str) -> Requirements:
    if not password:
        return Requirements()
    return Requirements(
        length=len(password) >= MIN_LENGTH,
        uppercase=bool(_UPPER.search(password)),
        lowercase=bool(_LOWER.search(password)),
        number=bool(_DIGIT.search(password)),
        special=bool(_SPECIAL.search(password)),
        not_common=not is_common(password),
    )


def strength_text(strength: int) -> str:
    for upper, label in STRENGTH_BUCKETS:
        if strength < upper:
            return label
    return TOP_LABEL


def evaluate(password: str) -> PasswordAssessment:
    requirements = check_requirements(password)
    strength = POINTS_PER_REQUIREMENT * sum(requirements.scored())
    strength = max(0, min(100, strength))
    return PasswordAssessment(
        requirements=requirements,
        strength=strength,
        strength_text=strength_text(strength),
    )


def is_strong(assessment: PasswordAssessment) -> bool:
    return assessment.strength >= STRONG_THRESHOLD


def check_password_strength(password: object) -> PasswordAssessment:
    """
    Server-side authoritative check. The client computes the same thing for instant feedback,
    but grading only ever trusts this result.
    """
    if not isinstance(password, str):
        raise ValidationError("password must be a string")
    assessment = evaluate(password)
    logger.debug(
        "password check length=%s strength=%s text=%s not_common=%s",
        len(password),
        assessment.strength,
        assessment.strength_text,
        assessment.requirements.not_common,
    )
    return assessment


_COMMON_PATTERN = re.compile(r"^123|abc|qwerty|password|admin|user", re.IGNORECASE)
_REPEATED = re.compile(r"(.)\1{2,}")


def evaluate_weighted(password: str) -> int:
    """
    Bonus/penalty scorer used by the practice sandbox. Rewards length and mixing character
    classes, penalises common patterns and runs of three identical characters.
    """
    strength = 0
    if len(password) >= 8:
        strength += 20
    if len(password) >= 12:
        strength += 10

    has_upper = bool(_UPPER.search(password))
    has_lower = bool(_LOWER.search(password))
    has_digit = bool(_DIGIT.search(password))
    has_special = bool(_SPECIAL.search(password))
    if has_upper:
        strength += 20
    if has_lower:
        strength += 15
    if has_digit:
        strength += 15
    if has_special:
        strength += 20

    classes = sum((has_upper, has_lower, has_digit, has_special))
    if classes >= 3:
        strength += 10
    if classes == 4:
        strength += 10

    if _COMMON_PATTERN.search(password):
        strength -= 20
    if _REPEATED.search(password):
        strength -= 10

    return max(0, min(100, strength))


def weighted_strength_text(strength: int) -> str:
    if strength < 30:
        return "Weak"
    if strength < 60:
        return "Moderate"
    if strength < 80:
        return "Strong"
    return TOP_LABEL
