import json

import httpx
import pytest
from google.genai import errors

from school_attendance.core.exceptions import InferenceSchemaError, InferenceServiceError
from school_attendance.fraud.gemini_assessor import VERDICT_SCHEMA, GeminiFraudAssessor, build_prompt, parse_verdict
from school_attendance.fraud.model import CheckInSubmission
from school_attendance.settings.model import ExpectedLocation

EXPECTED = ExpectedLocation(latitude=-6.241169, longitude=107.0378, radius_meters=100.0)
SUBMISSION = CheckInSubmission(photo=b"\x89PNG...", photo_mime_type="image/png", latitude=-6.25, longitude=107.04)


class FakeResponse:
    def __init__(self, text):
        self.text = text


class FakeModels:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    def generate_content(self, *, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error is not None:
            raise self.error
        return FakeResponse(self.text)


class FakeClient:
    def __init__(self, **kwargs):
        self.models = FakeModels(**kwargs)


def _assessor(**kwargs) -> GeminiFraudAssessor:
    return GeminiFraudAssessor(client=FakeClient(**kwargs), model="gemini-test")


def test_valid_answer_becomes_a_verdict():
    assessor = _assessor(text=json.dumps({"isFraudulent": True, "reason": "  Far outside the school radius "}))

    verdict = assessor.assess(SUBMISSION, EXPECTED)

    assert verdict.is_fraudulent is True
    assert verdict.reason == "Far outside the school radius"


def test_request_carries_prompt_photo_and_schema():
    assessor = _assessor(text='{"isFraudulent": false, "reason": "ok"}')

    assessor.assess(SUBMISSION, EXPECTED)

    call = assessor._client.models.calls[0]
    prompt, photo = call["contents"]
    assert call["model"] == "gemini-test"
    assert "-6.25" in prompt and "107.04" in prompt
    assert "100.0 meters" in prompt
    assert photo.inline_data.data == SUBMISSION.photo
    assert photo.inline_data.mime_type == "image/png"
    assert call["config"].response_mime_type == "application/json"
    assert call["config"].response_schema == VERDICT_SCHEMA


def test_build_prompt_mentions_expected_location():
    prompt = build_prompt(SUBMISSION, EXPECTED)

    assert "-6.241169" in prompt
    assert "107.0378" in prompt


@pytest.mark.parametrize(
    "text",
    [
        '{"isFraudulent": false}',
        '{"isFraudulent": "false", "reason": "looks fine"}',
        '{"isFraudulent": false, "reason": ""}',
        '{"isFraudulent": true, "reason": "   "}',
        '{"isFraudulent": false, "reason": "ok", "confidence": 0.9}',
        "not json at all",
        "",
        None,
    ],
)
def test_schema_violations_are_not_coerced(text):
    with pytest.raises(InferenceSchemaError):
        parse_verdict(text)


def test_missing_reason_raises_schema_error_from_assess():
    assessor = _assessor(text='{"isFraudulent": false}')

    with pytest.raises(InferenceSchemaError):
        assessor.assess(SUBMISSION, EXPECTED)


def test_api_error_becomes_inference_service_error():
    error = errors.ServerError(503, {"error": {"code": 503, "message": "overloaded", "status": "UNAVAILABLE"}})
    assessor = _assessor(error=error)

    with pytest.raises(InferenceServiceError) as excinfo:
        assessor.assess(SUBMISSION, EXPECTED)

    assert not isinstance(excinfo.value, InferenceSchemaError)


def test_transport_error_becomes_inference_service_error():
    assessor = _assessor(error=httpx.ConnectTimeout("timed out"))

    with pytest.raises(InferenceServiceError):
        assessor.assess(SUBMISSION, EXPECTED)
