from __future__ import annotations

import logging
from typing import Optional

import httpx
from google import genai
from google.genai import errors, types
from pydantic import ValidationError as PydanticValidationError

from ..core.exceptions import InferenceSchemaError, InferenceServiceError
from ..settings.model import ExpectedLocation
from .assessor import FraudAssessor
from .model import CheckInSubmission, FraudVerdict, FraudVerdictPayload

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.0-flash"

PROMPT_TEMPLATE = """You are an attendance validator specialised in detecting attendance fraud.

Use the information below to decide whether this school check-in is potentially fraudulent.
Consider where the person is compared with the expected school location, and whether the
attached selfie looks like a genuine, live photo of the person checking in.

Captured latitude: {latitude}
Captured longitude: {longitude}

Expected school location:
Latitude: {expected_latitude}
Longitude: {expected_longitude}
Radius: {radius} meters

The selfie is attached as an image.

Based on this information, decide whether the check-in is potentially fraudulent and give the
reason for your decision. Set isFraudulent accordingly.
"""

VERDICT_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "isFraudulent": types.Schema(
            type=types.Type.BOOLEAN,
            description="Whether the check-in is potentially fraudulent.",
        ),
        "reason": types.Schema(
            type=types.Type.STRING,
            description="Human readable reason for the decision.",
        ),
    },
    required=["isFraudulent", "reason"],
)


def build_prompt(submission: CheckInSubmission, expected: ExpectedLocation) -> str:
    return PROMPT_TEMPLATE.format(
        latitude=submission.latitude,
        longitude=submission.longitude,
        expected_latitude=expected.latitude,
        expected_longitude=expected.longitude,
        radius=expected.radius_meters,
    )


def parse_verdict(text: Optional[str]) -> FraudVerdict:
    """Validate the raw JSON answer against the two-field verdict schema."""

    if not text or not text.strip():
        raise InferenceSchemaError("Fraud assessment returned an empty response")
    try:
        payload = FraudVerdictPayload.model_validate_json(text)
    except PydanticValidationError as exc:
        raise InferenceSchemaError(f"Fraud assessment response violates the verdict schema: {exc}") from exc
    return payload.to_verdict()


class GeminiFraudAssessor(FraudAssessor):
    """Delegates the location + selfie judgment to a Gemini multimodal model.

    No distance math happens here; the model weighs the coordinates against
    the expected location and radius together with the photo.
    """

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        timeout_seconds: float = 30.0,
        client: Optional[genai.Client] = None,
    ):
        if client is None:
            client = genai.Client(
                api_key=api_key,
                http_options=types.HttpOptions(timeout=int(timeout_seconds * 1000)),
            )
        self._client = client
        self._model = model

    def assess(self, submission: CheckInSubmission, expected: ExpectedLocation) -> FraudVerdict:
        contents = [
            build_prompt(submission, expected),
            types.Part.from_bytes(data=submission.photo, mime_type=submission.photo_mime_type),
        ]
        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=VERDICT_SCHEMA,
            temperature=0.0,
        )

        try:
            response = self._client.models.generate_content(
                model=self._model,
                contents=contents,
                config=config,
            )
        except errors.APIError as exc:
            logger.warning("Fraud assessment failed: %s %s", exc.code, exc.message)
            raise InferenceServiceError("Fraud assessment service returned an error") from exc
        except httpx.HTTPError as exc:
            logger.warning("Fraud assessment transport error: %s", exc)
            raise InferenceServiceError("Fraud assessment service is unreachable") from exc

        verdict = parse_verdict(response.text)
        logger.info("Fraud verdict: fraudulent=%s", verdict.is_fraudulent)
        return verdict
