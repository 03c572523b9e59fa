import json

import pytest

from config import LlmRoute
from config.registry import OPENING_KEY, bind_model
from interview_session import InterviewConfig
from personas import RegistryOpeningGenerator, StaticOpeningGenerator, bind_gateway_opening
from personas.opening import build_opening_prompt

GREETING = "Hello! Let's talk about the Data Analyst role."


@pytest.fixture
def config():
    return InterviewConfig(job_role="Data Analyst", persona="mentor", cv_summary="SQL and Tableau")


def test_static_generator_returns_greeting(config):
    assert StaticOpeningGenerator().opening(config, GREETING) == GREETING


def test_unbound_registry_falls_back(config):
    assert RegistryOpeningGenerator().opening(config, GREETING) == GREETING


def test_registry_reply_is_used(config):
    seen = {}

    def _model(*, inputs):
        seen.update(inputs)
        return "  Hi, welcome! Ready when you are.  "

    bind_model(OPENING_KEY, _model)
    assert RegistryOpeningGenerator().opening(config, GREETING) == "Hi, welcome! Ready when you are."
    assert seen["persona"] == "mentor"
    assert seen["greeting"] == GREETING


def test_dict_reply_is_truncated(config):
    bind_model(OPENING_KEY, lambda **_: {"text": "x" * 50})
    assert RegistryOpeningGenerator(max_chars=10).opening(config, GREETING) == "x" * 10


@pytest.mark.parametrize("reply", ["   ", None, {"other": 1}])
def test_blank_reply_falls_back(config, reply):
    bind_model(OPENING_KEY, lambda **_: reply)
    assert RegistryOpeningGenerator().opening(config, GREETING) == GREETING


def test_failure_falls_back(config):
    def _boom(**_):
        raise TimeoutError("slow model")

    bind_model(OPENING_KEY, _boom)
    assert RegistryOpeningGenerator().opening(config, GREETING) == GREETING


def test_prompt_mentions_context():
    prompt = build_opening_prompt(
        {"persona": "stress", "job_role": "SRE", "language": "English", "cv_summary": "", "greeting": GREETING}
    )
    assert "stress interviewer" in prompt
    assert "Not provided" in prompt
    assert prompt.endswith(GREETING)


def test_gateway_binding(config):
    class _Response:
        status_code = 200
        text = ""

        def json(self):
            return {"choices": [{"message": {"content": json.dumps({"text": "Good morning!"})}}]}

    class _Client:
        def post(self, url, *, json, headers, timeout):
            return _Response()

    route = LlmRoute(name="o", base_url="http://x", endpoint="/chat", model="m", timeout_s=1)
    bind_gateway_opening(route, client=_Client())
    assert RegistryOpeningGenerator().opening(config, GREETING) == "Good morning!"
