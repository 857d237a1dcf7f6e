"""
Tests for the AI provider adapters, using httpx.MockTransport.
"""

import asyncio
import json

import httpx
import pytest
from conftest import SAMPLE_ANALYSIS

from compliance_scanner.errors import AnalyzerError
from compliance_scanner.repositories import GeminiComplianceAnalyzer, OpenAIComplianceAnalyzer
from compliance_scanner.repositories.compliance_prompt import build_prompt, parse_analysis


def openai_reply(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def test_parse_analysis_strips_code_fences():
    analysis = parse_analysis(f"```json\n{json.dumps(SAMPLE_ANALYSIS)}\n```")
    assert analysis.overall_status == "needs_review"
    assert analysis.violations[0].severity == "high"


@pytest.mark.parametrize("content", [None, "", "not json", "[1, 2]", '{"complianceScore": 500}'])
def test_parse_analysis_rejects_bad_replies(content):
    with pytest.raises(AnalyzerError):
        parse_analysis(content)


def test_build_prompt_mentions_context():
    prompt = build_prompt("Zero fees forever", "social_media_marketing")
    assert "Zero fees forever" in prompt
    assert "social media marketing" in prompt
    assert "social media" not in build_prompt("Zero fees forever")


def test_openai_request_and_parse():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=openai_reply(json.dumps(SAMPLE_ANALYSIS)))

    analyzer = OpenAIComplianceAnalyzer(
        api_key="sk-test",
        model_name="gpt-4",
        base_url="https://api.example.com/v1",
        transport=httpx.MockTransport(handler),
    )

    analysis = asyncio.run(analyzer.analyze("Guaranteed returns", context="website_marketing"))

    assert analysis.compliance_score == 72
    assert seen["url"] == "https://api.example.com/v1/chat/completions"
    assert seen["auth"] == "Bearer sk-test"
    assert seen["body"]["model"] == "gpt-4"
    assert seen["body"]["temperature"] == 0.1
    assert seen["body"]["max_tokens"] == 2000
    assert seen["body"]["messages"][0]["role"] == "system"


def test_openai_http_error_raises_analyzer_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(429, json={"error": "rate limited"}))
    analyzer = OpenAIComplianceAnalyzer(api_key="sk-test", base_url="https://api.example.com/v1", transport=transport)

    with pytest.raises(AnalyzerError):
        asyncio.run(analyzer.analyze("text"))


@pytest.mark.parametrize(
    "reply",
    [[1, 2], "ok", {"choices": ["x"]}, {"choices": {"first": 1}}, {"choices": [{"message": "hi"}]}, openai_reply(5)],
)
def test_openai_unexpected_reply_shape_raises_analyzer_error(reply):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=reply))
    analyzer = OpenAIComplianceAnalyzer(api_key="sk-test", base_url="https://api.example.com/v1", transport=transport)

    with pytest.raises(AnalyzerError):
        asyncio.run(analyzer.analyze("text"))


def test_openai_without_key_is_unavailable():
    analyzer = OpenAIComplianceAnalyzer(api_key="", base_url="https://api.example.com/v1")
    analyzer._api_key = None
    assert asyncio.run(analyzer.is_available()) is False
    with pytest.raises(AnalyzerError):
        asyncio.run(analyzer.analyze("text"))


def test_gemini_request_and_parse():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["key"] = request.url.params["key"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={"candidates": [{"content": {"parts": [{"text": json.dumps(SAMPLE_ANALYSIS)}]}}]},
        )

    analyzer = GeminiComplianceAnalyzer(
        api_key="g-test",
        model_name="gemini-1.5-flash",
        base_url="https://gemini.example.com/v1beta",
        transport=httpx.MockTransport(handler),
    )

    analysis = asyncio.run(analyzer.analyze("text"))

    assert analysis.confidence == 0.85
    assert seen["path"] == "/v1beta/models/gemini-1.5-flash:generateContent"
    assert seen["key"] == "g-test"
    assert seen["body"]["generationConfig"]["responseMimeType"] == "application/json"


def test_gemini_empty_candidates():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"candidates": []}))
    analyzer = GeminiComplianceAnalyzer(api_key="g", base_url="https://gemini.example.com", transport=transport)

    with pytest.raises(AnalyzerError):
        asyncio.run(analyzer.analyze("text"))


@pytest.mark.parametrize(
    "reply",
    [[1, 2], {"candidates": [None]}, {"candidates": [{"content": {"parts": ["text"]}}]}, {"candidates": [{"content": []}]}],
)
def test_gemini_unexpected_reply_shape_raises_analyzer_error(reply):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=reply))
    analyzer = GeminiComplianceAnalyzer(api_key="g", base_url="https://gemini.example.com", transport=transport)

    with pytest.raises(AnalyzerError):
        asyncio.run(analyzer.analyze("text"))
