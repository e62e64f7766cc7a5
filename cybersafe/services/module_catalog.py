"""
Training module catalog and challenge grading.

Modules are static content shipped with the service; only per-user progress lives in the database.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

from cybersafe.services.password_strength import PasswordAssessment, is_strong
from cybersafe.utils.errors import ValidationError

POINTS_PER_CHALLENGE = 100


@dataclass(frozen=True)
class PhishingChallenge:
    id: int
    title: str
    description: str
    sender: str
    subject: str
    body: tuple[str, ...]
    is_phishing: bool
    explanation: str


@dataclass(frozen=True)
class PasswordChallenge:
    id: int
    title: str
    prompt: str
    # Extra condition on top of strength >= 80.
    check: Callable[[str, PasswordAssessment], bool] = field(compare=False)
    hint: str = ""


@dataclass(frozen=True)
class GameModule:
    id: str
    title: str
    description: str
    difficulty: str
    type: str
    icon: str
    duration: str
    challenges: tuple = ()

    @property
    def total_challenges(self) -> int:
        return len(self.challenges)

    def challenge(self, challenge_id: int):
        for c in self.challenges:
            if c.id == challenge_id:
                return c
        return None


PHISHING_CHALLENGES = (
    PhishingChallenge(
        id=1,
        title="Challenge 1: Suspicious Email",
        description="Review this email and decide whether it is legitimate or a phishing attempt. "
                    "Look for clues in the sender address, links and overall message.",
        sender="accounts@paypa1-security.com",
        subject="Urgent: Your Account Has Been Limited",
        body=(
            "Dear Valued Customer,",
            "We've detected unusual activity on your PayPal account. To ensure your account security, "
            "we've temporarily limited some features.",
            "Please verify your information immediately by clicking the button below: Verify Account Now",
            "If you don't verify within 24 hours, your account will be suspended.",
        ),
        is_phishing=True,
        explanation="This is a phishing email. The sender domain is misspelled (paypa1-security.com instead "
                    "of paypal.com), the language is urgent and designed to create panic, and the greeting "
                    "is generic.",
    ),
    PhishingChallenge(
        id=2,
        title="Challenge 2: Team Calendar Invite",
        description="A colleague has shared a meeting invitation. Is it safe?",
        sender="maria.lopez@yourcompany.com",
        subject="Sprint planning moved to Thursday",
        body=(
            "Hi team,",
            "Sprint planning is moving to Thursday at 10:00 in the usual room. "
            "The updated invite is already in your calendar.",
            "No action needed unless you can't make it.",
            "Thanks, Maria",
        ),
        is_phishing=False,
        explanation="This email is legitimate. It comes from an internal address you recognise, asks for no "
                    "credentials, contains no links or attachments and creates no false urgency.",
    ),
    PhishingChallenge(
        id=3,
        title="Challenge 3: Package Delivery",
        description="You are expecting a parcel. Check this delivery notice carefully.",
        sender="notice@dhl-parcel-redelivery.info",
        subject="Delivery failed: action required",
        body=(
            "We attempted to deliver your package today but no one was available.",
            "To reschedule, pay the redelivery fee of $1.99 at the link below within 12 hours.",
            "Unclaimed packages will be returned to sender.",
        ),
        is_phishing=True,
        explanation="This is a phishing email. Carriers do not ask for small fees through unfamiliar domains, "
                    "the deadline is artificially short, and the sender domain is not the carrier's own.",
    ),
)

PASSWORD_CHALLENGES = (
    PasswordChallenge(
        id=1,
        title="Challenge 1: Build a Strong Password",
        prompt="Create a password that reaches at least 'Very Strong'.",
        check=lambda password, assessment: True,
        hint="Mix upper and lower case letters, numbers and symbols, and use at least 12 characters.",
    ),
    PasswordChallenge(
        id=2,
        title="Challenge 2: Passphrase",
        prompt="Create a very strong passphrase of at least 16 characters.",
        check=lambda password, assessment: len(password) >= 16,
        hint="Try a series of random words with numbers and symbols mixed in, "
             "e.g. correct-horse-battery-staple-42!",
    ),
    PasswordChallenge(
        id=3,
        title="Challenge 3: Avoid the Obvious",
        prompt="Create a very strong password that contains no common words or patterns.",
        check=lambda password, assessment: assessment.requirements.not_common,
        hint="Substituting @ for a or 0 for o does not hide 'password' from an attacker.",
    ),
)

MODULES = (
    GameModule(
        id="phishing",
        title="Phishing Frenzy",
        description="Learn to identify phishing emails and suspicious messages before they hook you!",
        difficulty="beginner",
        type="phishing",
        icon="fa-fish",
        duration="~15 min",
        challenges=PHISHING_CHALLENGES,
    ),
    GameModule(
        id="password",
        title="Password Challenge",
        description="Create strong, unique passwords and learn how to manage them securely.",
        difficulty="beginner",
        type="password",
        icon="fa-lock",
        duration="~10 min",
        challenges=PASSWORD_CHALLENGES,
    ),
)

_BY_ID = {m.id: m for m in MODULES}


def known_module_ids() -> tuple[str, ...]:
    return tuple(m.id for m in MODULES)


def get_module(module_id: str) -> Optional[GameModule]:
    return _BY_ID.get(module_id)


def get_challenge(module_id: str, challenge_id: int):
    module = get_module(module_id)
    challenge = module.challenge(challenge_id) if module else None
    if challenge is None:
        raise ValidationError(f"unknown challenge {challenge_id} in module '{module_id}'")
    return challenge


def grade_phishing_answer(challenge: PhishingChallenge, answer: str) -> bool:
    normalized = (answer or "").strip().lower()
    if normalized not in ("phishing", "legitimate"):
        raise ValidationError("answer must be 'phishing' or 'legitimate'")
    return (normalized == "phishing") == challenge.is_phishing


def grade_password_attempt(challenge: PasswordChallenge, password: str, assessment: PasswordAssessment) -> bool:
    return is_strong(assessment) and challenge.check(password, assessment)
