import asyncio
import dataclasses
import os
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("RATE_LIMIT_ENABLED", "1")

from fastapi.testclient import TestClient  # noqa: E402

from resume_builder.core.config import settings  # noqa: E402
from resume_builder.core.rate_limit import limiter  # noqa: E402
from resume_builder.features.ats_scoring import load_scoring_rules  # noqa: E402
from resume_builder.main import app  # noqa: E402

_MODEL_OUTPUT = (
    "=== FORMATTED RESUME ===\n"
    "JANE DOE\n"
    "Berlin | jane@example.com\n\n"
    "EXPERIENCE\n"
    "Acme - Backend Engineer\n"
    "- Built Python services with Docker on AWS.\n"
    "=== END FORMATTED RESUME ===\n\n"
    "=== MATCHED KEYWORDS ===\n"
    "python, docker\n\n"
    "=== IMPROVEMENT SUGGESTIONS ===\n"
    "1. Mention Kubernetes if you have used it.\n"
    "2. Add a projects section.\n"
)


class FakeAIClient:
    def __init__(self, output: str = _MODEL_OUTPUT, error: Exception | None = None):
        self.output = output
        self.error = error
        self.calls = []

    async def complete(self, messages):
        self.calls.append(list(messages))
        if self.error is not None:
            raise self.error
        return self.output


class SlowAIClient:
    async def complete(self, messages):
        await asyncio.sleep(1)
        return _MODEL_OUTPUT


class ResumeApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)
        cls.payload = {
            "personal_info": {
                "full_name": "Jane Doe",
                "location": "Berlin",
                "email": "jane@example.com",
                "linkedin": "",
                "github": "https://github.com/janedoe",
            },
            "summary": "Backend engineer with six years of experience building APIs.",
            "experience": [
                {
                    "company": "Acme",
                    "role": "Backend Engineer",
                    "start_date": "2019",
                    "end_date": "Present",
                    "description": "Built payment APIs and reduced latency by 30%.",
                    "technologies": ["Python"],
                }
            ],
            "education": [
                {
                    "institution": "TU Berlin",
                    "degree": "BSc Computer Science",
                    "start_date": "2014",
                    "end_date": "2018",
                }
            ],
            "skills": {"hard_skills": ["Python", "FastAPI"], "soft_skills": ["Communication"]},
            "job_description": (
                "We are hiring a Python engineer. "
                "Python, Docker, Kubernetes and AWS experience required."
            ),
        }

    def setUp(self):
        limiter.reset()

    def _post(self, payload=None, fake=None):
        fake = fake or FakeAIClient()
        with patch("resume_builder.services.resume_service.get_ai_client", return_value=fake):
            response = self.client.post("/v1/generate-resume", json=payload or self.payload)
        return response, fake

    def test_generate_resume_contract(self):
        response, fake = self._post()
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers["cache-control"], "no-store, max-age=0")
        self.assertIn("x-ratelimit-limit", response.headers)

        body = response.json()
        self.assertTrue(body["success"])
        data = body["data"]
        self.assertTrue(data["formatted_resume"].startswith("JANE DOE"))
        self.assertEqual(data["matched_keywords"], ["python", "docker", "aws"])
        self.assertEqual(data["missing_keywords"], ["kubernetes"])
        self.assertEqual(data["ats_score"], 75)
        self.assertEqual(
            data["suggestions"],
            [
                "Consider adding these keywords if relevant to your experience: kubernetes",
                "Mention Kubernetes if you have used it.",
                "Add a projects section.",
            ],
        )
        self.assertEqual(len(fake.calls), 1)
        self.assertIn("Kubernetes and AWS", fake.calls[0][1].content)

    def test_without_job_description_score_is_neutral(self):
        payload = dict(self.payload)
        payload["job_description"] = None
        response, _ = self._post(payload)
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual(data["ats_score"], 75)
        self.assertEqual(data["matched_keywords"], [])
        self.assertEqual(data["missing_keywords"], [])

    def test_suggestions_are_capped(self):
        output = _MODEL_OUTPUT + "".join(f"{i}. Extra suggestion {i}\n" for i in range(3, 15))
        response, _ = self._post(fake=FakeAIClient(output=output))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()["data"]["suggestions"]), 10)

    def test_algorithm_suggestions_come_first(self):
        payload = dict(self.payload)
        payload["experience"] = [dict(self.payload["experience"][0], description="Worked on internal tools.")]
        response, _ = self._post(payload)
        suggestions = response.json()["data"]["suggestions"]
        messages = load_scoring_rules().messages
        self.assertEqual(suggestions[1:3], [messages["metrics"], messages["action_verbs"]])

    def test_invalid_payload_returns_400(self):
        payload = dict(self.payload)
        payload["skills"] = {"hard_skills": [], "soft_skills": []}
        response, fake = self._post(payload)
        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertFalse(body["success"])
        self.assertEqual(body["error"], "Invalid input data")
        self.assertTrue(body["details"])
        self.assertEqual(fake.calls, [])

    def test_invalid_email_returns_400(self):
        payload = dict(self.payload)
        payload["personal_info"] = dict(self.payload["personal_info"], email="not-an-email")
        response, _ = self._post(payload)
        self.assertEqual(response.status_code, 400)

    def test_invalid_json_returns_400(self):
        response = self.client.post(
            "/v1/generate-resume",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Invalid input data")

    def test_invalid_payload_carries_rate_limit_headers(self):
        payload = dict(self.payload, summary="short")
        response, _ = self._post(payload)
        self.assertEqual(response.status_code, 400)
        self.assertIn("x-ratelimit-limit", response.headers)
        self.assertIn("x-ratelimit-remaining", response.headers)

    def test_invalid_payloads_use_rate_limit_quota(self):
        invalid = dict(self.payload, summary="short")
        status_codes = [self._post(invalid)[0].status_code for _ in range(5)]
        self.assertEqual(status_codes, [400] * 5)
        response, fake = self._post()
        self.assertEqual(response.status_code, 429)
        self.assertEqual(fake.calls, [])

    def test_generation_timeout_returns_500(self):
        fast_timeout = dataclasses.replace(settings, generation_timeout_s=0.05)
        with patch("resume_builder.services.resume_service.settings", fast_timeout):
            response, _ = self._post(fake=SlowAIClient())
        self.assertEqual(response.status_code, 500)
        body = response.json()
        self.assertFalse(body["success"])
        self.assertEqual(body["error"], "Request timeout")

    def test_generation_failure_returns_500(self):
        response, _ = self._post(fake=FakeAIClient(error=RuntimeError("upstream unavailable")))
        self.assertEqual(response.status_code, 500)
        body = response.json()
        self.assertFalse(body["success"])
        self.assertEqual(body["error"], "upstream unavailable")

    def test_empty_generation_returns_500(self):
        response, _ = self._post(fake=FakeAIClient(output="   "))
        self.assertEqual(response.status_code, 500)
        self.assertFalse(response.json()["success"])

    def test_rate_limit_returns_429(self):
        status_codes = []
        for _ in range(6):
            response, _ = self._post()
            status_codes.append(response.status_code)
        self.assertEqual(status_codes[:5], [200] * 5)
        self.assertEqual(status_codes[5], 429)
        body = response.json()
        self.assertFalse(body["success"])
        self.assertIn("retry_after", body)
        self.assertEqual(response.headers["x-ratelimit-remaining"], "0")

    def test_other_methods_are_not_allowed(self):
        response = self.client.get("/v1/generate-resume")
        self.assertEqual(response.status_code, 405)
        self.assertFalse(response.json()["success"])

    def test_health(self):
        response = self.client.get("/v1/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "healthy"})


if __name__ == "__main__":
    unittest.main()
