from __future__ import annotations

from typing import Protocol

from ..settings.model import ExpectedLocation
from .model import CheckInSubmission, FraudVerdict


class FraudAssessor(Protocol):
    """Judges whether a check-in is plausibly fraudulent.

    Implementations raise ``InferenceServiceError`` when no verdict could be
    obtained; they never fall back to "not fraudulent".
    """

    def assess(self, submission: CheckInSubmission, expected: ExpectedLocation) -> FraudVerdict:
        raise NotImplementedError
