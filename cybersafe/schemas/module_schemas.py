"""
Module catalog, password and phishing challenge schemas.
"""

from typing import Optional

from pydantic import Field

from cybersafe.schemas.progress_schemas import CamelModel
from cybersafe.services.module_catalog import GameModule, PasswordChallenge, PhishingChallenge
from cybersafe.services.password_strength import PasswordAssessment


class PhishingChallengeResponse(CamelModel):
    id: int
    title: str
    description: str
    sender: str
    subject: str
    body: list[str]

    @classmethod
    def from_challenge(cls, c: PhishingChallenge) -> "PhishingChallengeResponse":
        # is_phishing and the explanation stay server-side until an answer is submitted.
        return cls(id=c.id, title=c.title, description=c.description, sender=c.sender, subject=c.subject, body=list(c.body))


class PasswordChallengeResponse(CamelModel):
    id: int
    title: str
    prompt: str
    hint: str

    @classmethod
    def from_challenge(cls, c: PasswordChallenge) -> "PasswordChallengeResponse":
        return cls(id=c.id, title=c.title, prompt=c.prompt, hint=c.hint)


class GameModuleResponse(CamelModel):
    id: str
    title: str
    description: str
    difficulty: str
    type: str
    icon: str
    duration: str
    total_challenges: int

    @classmethod
    def from_module(cls, m: GameModule) -> "GameModuleResponse":
        return cls(
            id=m.id,
            title=m.title,
            description=m.description,
            difficulty=m.difficulty,
            type=m.type,
            icon=m.icon,
            duration=m.duration,
            total_challenges=m.total_challenges,
        )


class GameModuleDetailResponse(GameModuleResponse):
    challenges: list[PhishingChallengeResponse | PasswordChallengeResponse]

    @classmethod
    def from_module(cls, m: GameModule) -> "GameModuleDetailResponse":
        base = GameModuleResponse.from_module(m)
        challenges = [
            PhishingChallengeResponse.from_challenge(c) if isinstance(c, PhishingChallenge)
            else PasswordChallengeResponse.from_challenge(c)
            for c in m.challenges
        ]
        return cls(**base.model_dump(), challenges=challenges)


class PasswordRequirementsResponse(CamelModel):
    length: bool
    uppercase: bool
    lowercase: bool
    number: bool
    special: bool
    not_common: bool


class PasswordAssessmentResponse(CamelModel):
    requirements: PasswordRequirementsResponse
    strength: int
    strength_text: str

    @classmethod
    def from_assessment(cls, a: PasswordAssessment) -> "PasswordAssessmentResponse":
        r = a.requirements
        return cls(
            requirements=PasswordRequirementsResponse(
                length=r.length,
                uppercase=r.uppercase,
                lowercase=r.lowercase,
                number=r.number,
                special=r.special,
                not_common=r.not_common,
            ),
            strength=a.strength,
            strength_text=a.strength_text,
        )


class PasswordCheckRequest(CamelModel):
    password: str


class PasswordSubmitRequest(CamelModel):
    challenge_id: int = 1
    password: str


class PasswordSubmitResponse(CamelModel):
    success: bool
    message: str
    strength: int
    score: int
    progress: int


class PhishingSubmitRequest(CamelModel):
    challenge_id: int
    answer: str = Field(description="'phishing' or 'legitimate'")


class PhishingSubmitResponse(CamelModel):
    is_correct: bool
    explanation: str
    score: int
    progress: int
    next_challenge_id: Optional[int] = None
