"""Machine translation that keeps bracketed template values intact."""

import copy
import logging
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from openai import OpenAI, OpenAIError

from i18n_center_api.errors import ExternalServiceError, PlaceholderLostError
from i18n_center_api.services.templates import missing_placeholders, restore_placeholders
from i18n_center_api.settings import Settings, get_settings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a professional translator. Always preserve template values in square brackets."
USER_PROMPT = (
    "Translate the following text from {source} to {target}. "
    "IMPORTANT: Do NOT translate anything inside square brackets []. "
    "Preserve all template values exactly as they are. "
    "Only translate the text outside the brackets.\n\nText to translate: {text}"
)


class TranslationEngine:
    """External engine contract. Failures must be raised as ExternalServiceError."""

    def translate(self, text: str, source_locale: str, target_locale: str) -> str:
        raise NotImplementedError


class OpenAIEngine(TranslationEngine):
    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gpt-3.5-turbo",
        timeout: float = 60.0,
        client: Optional[OpenAI] = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._client = client

    def _get_client(self) -> OpenAI:
        if self._client is None:
            if not self.api_key:
                raise ExternalServiceError("OpenAI API key not configured")
            self._client = OpenAI(api_key=self.api_key, timeout=self.timeout)
        return self._client

    def translate(self, text: str, source_locale: str, target_locale: str) -> str:
        client = self._get_client()
        try:
            response = client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": USER_PROMPT.format(source=source_locale, target=target_locale, text=text)},
                ],
            )
        except OpenAIError as exc:
            logger.error(
                "OpenAI request failed",
                extra={"source_locale": source_locale, "target_locale": target_locale, "error": str(exc)},
            )
            raise ExternalServiceError(f"OpenAI API error: {exc}", locale=target_locale) from exc

        if not response.choices or response.choices[0].message.content is None:
            raise ExternalServiceError("no translation returned", locale=target_locale)
        return response.choices[0].message.content.strip()


EngineFactory = Callable[[Optional[str]], TranslationEngine]


def openai_engine_factory(settings: Optional[Settings] = None) -> EngineFactory:
    """Build engines from a per-application key, falling back to OPENAI_API_KEY."""
    settings = settings or get_settings()

    def factory(api_key: Optional[str] = None) -> TranslationEngine:
        return OpenAIEngine(
            api_key or settings.openai_api_key,
            model=settings.openai_model,
            timeout=settings.openai_timeout_seconds,
        )

    return factory


class TemplatePreservingTranslator:
    def __init__(self, engine: TranslationEngine, placeholder_policy: str = "drop") -> None:
        if placeholder_policy not in {"drop", "raise"}:
            raise ValueError(f"unknown placeholder policy: {placeholder_policy}")
        self.engine = engine
        self.placeholder_policy = placeholder_policy

    def translate_text(self, text: str, source_locale: str, target_locale: str) -> str:
        translated = self.engine.translate(text, source_locale, target_locale)
        restored = restore_placeholders(text, translated)

        lost = missing_placeholders(text, restored)
        if lost:
            if self.placeholder_policy == "raise":
                raise PlaceholderLostError(lost, locale=target_locale)
            logger.warning(
                "Placeholders dropped by translation",
                extra={"target_locale": target_locale, "placeholders": lost},
            )
        return restored

    def translate_payload(
        self,
        payload: Mapping[str, Any],
        source_locale: str,
        target_locale: str,
    ) -> Dict[str, Any]:
        """Translate every string leaf of a nested payload, depth first.

        Nested objects recurse; any other leaf is copied unchanged. The first
        failing leaf aborts the whole payload.
        """
        return self._translate_mapping(payload, source_locale, target_locale, ())

    def _translate_mapping(
        self,
        mapping: Mapping[str, Any],
        source_locale: str,
        target_locale: str,
        path: Tuple[str, ...],
    ) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for key, value in mapping.items():
            key_path = path + (str(key),)
            if isinstance(value, str):
                try:
                    result[key] = self.translate_text(value, source_locale, target_locale)
                except ExternalServiceError as exc:
                    dotted = ".".join(key_path)
                    raise ExternalServiceError(
                        f"error translating key {dotted}: {exc}",
                        locale=target_locale,
                        key_path=dotted,
                    ) from exc
            elif isinstance(value, Mapping):
                result[key] = self._translate_mapping(value, source_locale, target_locale, key_path)
            else:
                result[key] = copy.deepcopy(value)
        return result
