"""
Fact Check Service Module for Truth Checker

Wraps a normalized query in the verification prompt and sends it to the
configured chat model through LangChain. The model's answer is returned as
plain text; its structure (verdict, confidence score, evidence, sources)
is requested by the prompt but not parsed here.

Supported providers map onto LangChain model identifiers:
- google:    google_genai:<model> (Gemini, optionally with Search grounding)
- openai:    openai:<model>
- anthropic: anthropic:<model>
- local:     ollama:<model>
"""

import logging

from datetime import date
from typing import Any

from langchain.chat_models import init_chat_model
from langchain_core.messages import HumanMessage

from truth_checker.config import Settings, get_settings


# Tool definition enabling Gemini's built-in Google Search grounding
GOOGLE_SEARCH_TOOL: dict[str, Any] = {"google_search": {}}

PROVIDER_MODEL_PREFIXES: dict[str, str] = {
    "google": "google_genai",
    "openai": "openai",
    "anthropic": "anthropic",
    "local": "ollama",
}

VERIFICATION_PROMPT_TEMPLATE: str = """
You are an expert fact-checker with access to real-time information through Google Search.
Today's date: {current_date}

CONTENT TO VERIFY:
{query}

INSTRUCTIONS:
1. Use Google Search to find current, reliable sources to verify the claims
2. Cross-reference multiple authoritative sources
3. Focus on recent, credible sources (news organizations, academic institutions, government sites, etc.)
4. Provide a confidence score (0-100) for your assessment
5. Format your response EXACTLY as follows:

## VERDICT
[TRUE/FALSE/PARTIALLY TRUE/NEEDS MORE CONTEXT]

## CONFIDENCE_SCORE
[Number from 0-100 representing confidence in the verdict]

## SUMMARY
[Provide a clear, concise summary of your findings in 2-3 sentences]

## KEY_EVIDENCE
• [Evidence point 1 with specific details]
• [Evidence point 2 with specific details]
• [Evidence point 3 with specific details]

## TRUSTED_SOURCES
• [Source 1 name and brief description]|[FULL_VALID_URL_WITH_HTTPS]
• [Source 2 name and brief description]|[FULL_VALID_URL_WITH_HTTPS]
• [Source 3 name and brief description]|[FULL_VALID_URL_WITH_HTTPS]

IMPORTANT: Ensure all URLs are complete, valid, and start with https://. Do not provide partial URLs or URLs that redirect to error pages.

## ADDITIONAL_CONTEXT
[Any important context, nuances, or caveats that readers should know]

CRITICAL:
- Always use Google Search to find current, reliable sources
- Use the pipe symbol "|" to separate source descriptions from URLs
- Provide specific confidence score based on source quality and evidence strength
- Prioritize established news organizations, academic institutions, government agencies, and fact-checking organizations
"""


# =============================================================================
# EXCEPTIONS
# =============================================================================


class FactCheckError(Exception):
    """Base exception for fact check service errors."""


class ProviderInitializationError(FactCheckError):
    """Raised when the chat model cannot be initialized."""


# =============================================================================
# HELPERS
# =============================================================================


def format_prompt_date(today: date) -> str:
    """Format a date the way the prompt states it, e.g. 'March 5, 2025'."""
    return f"{today:%B} {today.day}, {today.year}"


def response_text(response: Any) -> str:
    """
    Extract plain text from a chat model response.

    Content may be a string or a list of content parts (strings or dicts
    with a ``text`` key), depending on the provider.
    """
    content = getattr(response, "content", response)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: list[str] = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
        return "".join(parts)
    return str(content)


# =============================================================================
# FACT CHECK SERVICE
# =============================================================================


class FactCheckService:
    """
    Service that asks the configured chat model to fact-check a query.

    A fresh model is initialized per verification; the service holds no
    conversation state.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.logger = logging.getLogger(__name__)
        self.settings = settings or get_settings()
        self.provider = self.settings.default_ai_provider
        self.model = self.settings.default_ai_model

    def build_prompt(self, query: str, today: date | None = None) -> str:
        """
        Render the verification prompt around a normalized query.

        Args:
            query: Normalized query text
            today: Date stated in the prompt (defaults to today)
        """
        current_date = format_prompt_date(today or date.today())
        return VERIFICATION_PROMPT_TEMPLATE.format(current_date=current_date, query=query)

    def _init_model(self) -> Any:
        """
        Initialize the chat model for the configured provider.

        Raises:
            ProviderInitializationError: Unknown provider, missing API key or
                a LangChain initialization failure
        """
        provider, model = self.provider, self.model
        self.logger.info(f"Initializing model: provider={provider}, model={model}")

        prefix = PROVIDER_MODEL_PREFIXES.get(provider)
        if prefix is None:
            raise ProviderInitializationError(f"Unsupported provider: {provider}")

        model_kwargs: dict[str, Any] = {
            "temperature": self.settings.ai_temperature,
        }
        if provider != "local":
            api_key = self.settings.get_provider_api_key(provider)
            if not api_key:
                raise ProviderInitializationError(
                    f"API key not configured for provider '{provider}'"
                )
            model_kwargs["api_key"] = api_key

        if provider == "google":
            model_kwargs["max_output_tokens"] = self.settings.ai_max_output_tokens
        else:
            model_kwargs["max_tokens"] = self.settings.ai_max_output_tokens

        model_id = f"{prefix}:{model}"
        try:
            chat_model = init_chat_model(model_id, **model_kwargs)
        except Exception as e:
            error_msg = f"Failed to initialize model {model_id}: {e}"
            self.logger.exception(error_msg)
            raise ProviderInitializationError(error_msg) from e

        if provider == "google" and self.settings.enable_search_grounding:
            try:
                chat_model = chat_model.bind_tools([GOOGLE_SEARCH_TOOL])
            except Exception as e:
                self.logger.warning(f"Search grounding unavailable, continuing without it: {e}")

        self.logger.info(f"Model initialized successfully: {model_id}")
        return chat_model

    async def verify(self, query: str) -> str:
        """
        Fact-check a normalized query.

        Args:
            query: Normalized query text from the content router

        Returns:
            The model's fact-check report as text

        Raises:
            ProviderInitializationError: If the model cannot be initialized
            FactCheckError: If the model call fails
        """
        chat_model = self._init_model()
        prompt = self.build_prompt(query)

        self.logger.info("Sending verification request to chat model")
        try:
            response = await chat_model.ainvoke([HumanMessage(content=prompt)])
        except Exception as e:
            error_msg = f"Error during fact check: {e}"
            self.logger.exception(error_msg)
            raise FactCheckError(error_msg) from e

        text = response_text(response)
        self.logger.info(f"Received model response: {text[:200]}...")
        return text


def create_fact_check_service(settings: Settings | None = None) -> FactCheckService:
    """Factory used by FastAPI dependency injection."""
    return FactCheckService(settings=settings)


__all__ = [
    "FactCheckError",
    "FactCheckService",
    "ProviderInitializationError",
    "create_fact_check_service",
    "format_prompt_date",
    "response_text",
]
