import json
import logging
from dataclasses import asdict, dataclass, field
from functools import lru_cache
from typing import Any

import anthropic
from langchain_anthropic import ChatAnthropic
from langchain_openai import ChatOpenAI
from openai import OpenAI

from app.core.config import Settings, get_settings
from app.core.errors import AiProviderError
from app.models import AiProvider, ContentType

logger = logging.getLogger(__name__)

TYPE_DESCRIPTIONS = {
    ContentType.HEADLINE: "attention-grabbing headline",
    ContentType.DESCRIPTION: "detailed description",
    ContentType.AD_COPY: "persuasive advertisement copy",
    ContentType.PRODUCT_DESCRIPTION: "product description",
    ContentType.SOCIAL_POST: "social media post",
    ContentType.EMAIL_SUBJECT: "email subject line",
    ContentType.BLOG_TITLE: "blog article title",
}


@dataclass
class GenerateContentRequest:
    type: ContentType
    briefing: str
    target_audience: str | None = None
    tone: str | None = None
    keywords: list[str] = field(default_factory=list)
    language: str | None = None
    provider: AiProvider | None = None


@dataclass
class TranslateContentRequest:
    content: str
    source_language: str
    target_language: str
    context: str | None = None
    provider: AiProvider | None = None


@dataclass
class GenerationResult:
    content: str
    metadata: dict[str, Any]


@dataclass
class ContentAnalysis:
    sentiment: str = "neutral"
    confidence: float = 0.5
    keywords: list[str] = field(default_factory=list)
    tone: str = "unknown"
    readability_score: float = 50

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["readabilityScore"] = data.pop("readability_score")
        return data

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "ContentAnalysis":
        return cls(
            sentiment=str(payload.get("sentiment", "neutral")),
            confidence=float(payload.get("confidence", 0.5)),
            keywords=[str(k) for k in payload.get("keywords") or []],
            tone=str(payload.get("tone", "unknown")),
            readability_score=float(payload.get("readabilityScore", payload.get("readability_score", 50))),
        )


def build_content_prompt(request: GenerateContentRequest) -> str:
    prompt = f"Create a {TYPE_DESCRIPTIONS[ContentType(request.type)]} based on the following requirements:\n\n"
    prompt += f"Briefing: {request.briefing}\n"
    if request.target_audience:
        prompt += f"Target Audience: {request.target_audience}\n"
    if request.tone:
        prompt += f"Tone: {request.tone}\n"
    if request.keywords:
        prompt += f"Keywords to include: {', '.join(request.keywords)}\n"
    if request.language and request.language != "en":
        prompt += f"Language: {request.language}\n"
    prompt += "\nPlease provide only the content without any additional explanation."
    return prompt


def build_translation_prompt(request: TranslateContentRequest) -> str:
    prompt = f"Translate the following content from {request.source_language} to {request.target_language}:\n\n"
    prompt += f'Content: "{request.content}"\n\n'
    if request.context:
        prompt += f"Context: {request.context}\n\n"
    prompt += (
        "Please provide a natural, culturally appropriate translation that maintains the original tone and intent. "
        "Provide only the translated content without additional explanation."
    )
    return prompt


def build_analysis_prompt(content: str) -> str:
    return f"""
Analyze the following content and provide a JSON response with sentiment analysis:

Content: "{content}"

Please respond with a JSON object containing:
- sentiment: "positive", "negative", or "neutral"
- confidence: number between 0 and 1
- keywords: array of important keywords
- tone: descriptive tone (e.g., "professional", "casual", "urgent")
- readabilityScore: number between 0 and 100
""".strip()


def _usage_dict(usage: Any) -> dict | None:
    if usage is None:
        return None
    if hasattr(usage, "model_dump"):
        return usage.model_dump()
    return dict(usage)


class AiGateway:
    """Text generation, translation and analysis over the configured providers.

    Each provider is optional: a client exists only when its API key is set,
    and asking for a provider without a client raises ``AiProviderError``.
    """

    def __init__(
        self,
        settings: Settings,
        openai_client: OpenAI | None = None,
        anthropic_client: anthropic.Anthropic | None = None,
        langchain_model: Any | None = None,
    ):
        self.openai_model = settings.openai_model
        self.anthropic_model = settings.anthropic_model
        self.openai = openai_client
        self.anthropic = anthropic_client
        self.langchain = langchain_model
        self.langchain_backend = "openai" if settings.openai_api_key else "anthropic"

    @classmethod
    def from_settings(cls, settings: Settings) -> "AiGateway":
        openai_client = None
        anthropic_client = None
        langchain_model = None
        if settings.openai_api_key:
            openai_client = OpenAI(api_key=settings.openai_api_key)
            langchain_model = ChatOpenAI(api_key=settings.openai_api_key, model=settings.openai_model, temperature=0.7)
            logger.info("OpenAI provider configured (model %s)", settings.openai_model)
        if settings.anthropic_api_key:
            anthropic_client = anthropic.Anthropic(api_key=settings.anthropic_api_key)
            if langchain_model is None:
                langchain_model = ChatAnthropic(
                    api_key=settings.anthropic_api_key, model=settings.anthropic_model, temperature=0.7
                )
            logger.info("Anthropic provider configured (model %s)", settings.anthropic_model)
        if not openai_client and not anthropic_client:
            logger.warning("No AI provider keys configured; generation and translation are disabled")
        return cls(settings, openai_client, anthropic_client, langchain_model)

    def generate(self, request: GenerateContentRequest) -> GenerationResult:
        provider = AiProvider(request.provider or AiProvider.OPENAI)
        prompt = build_content_prompt(request)
        try:
            if provider == AiProvider.OPENAI and self.openai:
                return self._generate_with_openai(prompt)
            if provider == AiProvider.ANTHROPIC and self.anthropic:
                return self._complete_with_anthropic(prompt, max_tokens=500)
            if provider == AiProvider.LANGCHAIN and self.langchain:
                return self._generate_with_langchain(prompt)
            raise AiProviderError(f"AI provider {provider.value} not configured")
        except AiProviderError as exc:
            logger.error("Content generation failed: %s", exc)
            raise
        except Exception as exc:
            logger.error("Content generation failed: %s", exc)
            raise AiProviderError(str(exc)) from exc

    def translate(self, request: TranslateContentRequest) -> GenerationResult:
        provider = AiProvider(request.provider or AiProvider.OPENAI)
        prompt = build_translation_prompt(request)
        try:
            if provider == AiProvider.OPENAI and self.openai:
                response = self.openai.chat.completions.create(
                    model=self.openai_model,
                    messages=[{"role": "user", "content": prompt}],
                    temperature=0.3,
                )
                return GenerationResult(
                    content=(response.choices[0].message.content or "").strip(),
                    metadata={"model": self.openai_model, "provider": "openai", "usage": _usage_dict(response.usage)},
                )
            if provider == AiProvider.ANTHROPIC and self.anthropic:
                return self._complete_with_anthropic(prompt, max_tokens=1000)
            raise AiProviderError(f"AI provider {provider.value} not configured")
        except AiProviderError as exc:
            logger.error("Translation failed: %s", exc)
            raise
        except Exception as exc:
            logger.error("Translation failed: %s", exc)
            raise AiProviderError(str(exc)) from exc

    def analyze(self, content: str) -> ContentAnalysis:
        try:
            if not self.openai:
                raise AiProviderError("OpenAI not configured for content analysis")
            response = self.openai.chat.completions.create(
                model=self.openai_model,
                messages=[{"role": "user", "content": build_analysis_prompt(content)}],
                temperature=0.1,
            )
            raw = (response.choices[0].message.content or "").strip() or "{}"
            return ContentAnalysis.from_payload(json.loads(raw))
        except Exception as exc:
            logger.error("Content analysis failed: %s", exc)
            return ContentAnalysis()

    def _generate_with_openai(self, prompt: str) -> GenerationResult:
        response = self.openai.chat.completions.create(
            model=self.openai_model,
            messages=[{"role": "user", "content": prompt}],
            temperature=0.7,
            max_tokens=500,
        )
        usage = response.usage
        return GenerationResult(
            content=(response.choices[0].message.content or "").strip(),
            metadata={
                "model": self.openai_model,
                "provider": "openai",
                "usage": _usage_dict(usage),
                "prompt_tokens": getattr(usage, "prompt_tokens", None),
                "completion_tokens": getattr(usage, "completion_tokens", None),
            },
        )

    def _complete_with_anthropic(self, prompt: str, max_tokens: int) -> GenerationResult:
        response = self.anthropic.messages.create(
            model=self.anthropic_model,
            max_tokens=max_tokens,
            messages=[{"role": "user", "content": prompt}],
        )
        parts = [getattr(block, "text", "") for block in response.content if getattr(block, "type", "") == "text"]
        return GenerationResult(
            content="\n".join(parts).strip(),
            metadata={"model": self.anthropic_model, "provider": "anthropic", "usage": _usage_dict(response.usage)},
        )

    def _generate_with_langchain(self, prompt: str) -> GenerationResult:
        message = self.langchain.invoke(prompt)
        text = message.content if isinstance(message.content, str) else str(message.content)
        return GenerationResult(
            content=text.strip(),
            metadata={"provider": "langchain", "model": self.langchain_backend},
        )


@lru_cache
def get_ai_gateway() -> AiGateway:
    return AiGateway.from_settings(get_settings())
