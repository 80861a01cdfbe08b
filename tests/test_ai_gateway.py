import json
from types import SimpleNamespace

import pytest

from app.core.config import Settings
from app.core.errors import AiProviderError
from app.models import AiProvider, ContentType
from app.services.ai_gateway import (
    AiGateway,
    ContentAnalysis,
    GenerateContentRequest,
    TranslateContentRequest,
    build_content_prompt,
    build_translation_prompt,
)

NEUTRAL = {"sentiment": "neutral", "confidence": 0.5, "keywords": [], "tone": "unknown", "readabilityScore": 50}


def _openai_stub(reply=None, error=None):
    calls = []

    def create(**kwargs):
        calls.append(kwargs)
        if error:
            raise error
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=reply))],
            usage=SimpleNamespace(prompt_tokens=10, completion_tokens=5, total_tokens=15),
        )

    client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    return client, calls


def _anthropic_stub(reply):
    calls = []

    def create(**kwargs):
        calls.append(kwargs)
        return SimpleNamespace(content=[SimpleNamespace(type="text", text=reply)], usage=None)

    return SimpleNamespace(messages=SimpleNamespace(create=create)), calls


def test_content_prompt_includes_optional_lines():
    prompt = build_content_prompt(
        GenerateContentRequest(
            type=ContentType.SOCIAL_POST,
            briefing="Spring sale",
            target_audience="Students",
            tone="Playful",
            keywords=["sale", "spring"],
            language="es",
        )
    )
    assert prompt.startswith("Create a social media post based on the following requirements:\n\n")
    assert "Briefing: Spring sale\n" in prompt
    assert "Target Audience: Students\n" in prompt
    assert "Tone: Playful\n" in prompt
    assert "Keywords to include: sale, spring\n" in prompt
    assert "Language: es\n" in prompt
    assert prompt.endswith("Please provide only the content without any additional explanation.")


def test_content_prompt_omits_empty_lines_and_english():
    prompt = build_content_prompt(GenerateContentRequest(type=ContentType.HEADLINE, briefing="", language="en"))
    assert "attention-grabbing headline" in prompt
    assert "Target Audience" not in prompt
    assert "Tone" not in prompt
    assert "Keywords" not in prompt
    assert "Language" not in prompt


def test_translation_prompt():
    prompt = build_translation_prompt(
        TranslateContentRequest(content="Hello", source_language="en", target_language="fr", context="Greeting card")
    )
    assert prompt.startswith("Translate the following content from en to fr:\n\n")
    assert 'Content: "Hello"' in prompt
    assert "Context: Greeting card" in prompt
    assert "maintains the original tone and intent" in prompt

    without_context = build_translation_prompt(
        TranslateContentRequest(content="Hello", source_language="en", target_language="fr")
    )
    assert "Context:" not in without_context


def test_unconfigured_provider_raises():
    gateway = AiGateway(Settings())
    with pytest.raises(AiProviderError, match="AI provider OPENAI not configured"):
        gateway.generate(GenerateContentRequest(type=ContentType.HEADLINE, briefing="x"))
    with pytest.raises(AiProviderError, match="AI provider ANTHROPIC not configured"):
        gateway.translate(
            TranslateContentRequest(content="x", source_language="en", target_language="de", provider=AiProvider.ANTHROPIC)
        )


def test_generate_with_openai():
    client, calls = _openai_stub(reply="  Boil faster.  ")
    gateway = AiGateway(Settings(), openai_client=client)

    result = gateway.generate(GenerateContentRequest(type=ContentType.HEADLINE, briefing="Kettle"))

    assert result.content == "Boil faster."
    assert result.metadata["provider"] == "openai"
    assert result.metadata["prompt_tokens"] == 10
    assert result.metadata["completion_tokens"] == 5
    assert calls[0]["temperature"] == 0.7
    assert calls[0]["max_tokens"] == 500


def test_generate_wraps_provider_errors():
    client, _ = _openai_stub(error=RuntimeError("rate limited"))
    gateway = AiGateway(Settings(), openai_client=client)
    with pytest.raises(AiProviderError, match="rate limited"):
        gateway.generate(GenerateContentRequest(type=ContentType.HEADLINE, briefing="Kettle"))


def test_generate_and_translate_with_anthropic():
    client, calls = _anthropic_stub("Hervir más rápido")
    gateway = AiGateway(Settings(), anthropic_client=client)

    generated = gateway.generate(
        GenerateContentRequest(type=ContentType.AD_COPY, briefing="Kettle", provider=AiProvider.ANTHROPIC)
    )
    translated = gateway.translate(
        TranslateContentRequest(content="x", source_language="en", target_language="es", provider=AiProvider.ANTHROPIC)
    )

    assert generated.content == "Hervir más rápido"
    assert generated.metadata["provider"] == "anthropic"
    assert translated.metadata["model"] == gateway.anthropic_model
    assert [c["max_tokens"] for c in calls] == [500, 1000]


def test_generate_with_langchain():
    model = SimpleNamespace(invoke=lambda prompt: SimpleNamespace(content=" Chain copy "))
    gateway = AiGateway(Settings(), langchain_model=model)

    result = gateway.generate(
        GenerateContentRequest(type=ContentType.BLOG_TITLE, briefing="Kettle", provider=AiProvider.LANGCHAIN)
    )

    assert result.content == "Chain copy"
    assert result.metadata["provider"] == "langchain"


def test_langchain_is_not_a_translation_backend():
    model = SimpleNamespace(invoke=lambda prompt: SimpleNamespace(content="x"))
    gateway = AiGateway(Settings(), langchain_model=model)
    with pytest.raises(AiProviderError, match="LANGCHAIN not configured"):
        gateway.translate(
            TranslateContentRequest(content="x", source_language="en", target_language="es", provider=AiProvider.LANGCHAIN)
        )


def test_analyze_without_openai_returns_neutral_default():
    assert AiGateway(Settings()).analyze("Anything").to_dict() == NEUTRAL


def test_analyze_falls_back_on_unparsable_reply():
    client, _ = _openai_stub(reply="not json at all")
    assert AiGateway(Settings(), openai_client=client).analyze("Anything").to_dict() == NEUTRAL


def test_analyze_falls_back_on_api_error():
    client, _ = _openai_stub(error=ConnectionError("unreachable"))
    assert AiGateway(Settings(), openai_client=client).analyze("Anything").to_dict() == NEUTRAL


def test_analyze_parses_provider_json():
    reply = json.dumps(
        {"sentiment": "positive", "confidence": 0.8, "keywords": ["fast"], "tone": "urgent", "readabilityScore": 64}
    )
    client, calls = _openai_stub(reply=reply)

    analysis = AiGateway(Settings(), openai_client=client).analyze("Boil faster")

    assert analysis == ContentAnalysis(
        sentiment="positive", confidence=0.8, keywords=["fast"], tone="urgent", readability_score=64
    )
    assert calls[0]["temperature"] == 0.1


def test_analyze_coerces_numeric_strings():
    reply = json.dumps({"sentiment": "neutral", "confidence": "0.7", "readabilityScore": "64"})
    client, _ = _openai_stub(reply=reply)

    analysis = AiGateway(Settings(), openai_client=client).analyze("Boil faster")

    assert analysis.readability_score == 64.0
    assert isinstance(analysis.readability_score, float)
    assert analysis.confidence == 0.7
