from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, StrictBool


@dataclass(frozen=True)
class CheckInSubmission:
    """One check-in attempt: selfie plus captured coordinates. Never persisted."""

    photo: bytes
    photo_mime_type: str
    latitude: float
    longitude: float


@dataclass(frozen=True)
class FraudVerdict:
    is_fraudulent: bool
    reason: str


class FraudVerdictPayload(BaseModel):
    """Wire shape the inference service must answer with.

    Exactly two fields; a missing, empty or mistyped field is a protocol
    violation, never a default.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True, str_strip_whitespace=True)

    is_fraudulent: StrictBool = Field(alias="isFraudulent")
    reason: str = Field(min_length=1)

    def to_verdict(self) -> FraudVerdict:
        return FraudVerdict(is_fraudulent=self.is_fraudulent, reason=self.reason.strip())
