"""
Client for the translate-name edge function.
Turns an Arabic full name into its English transliteration.
"""
import logging
from typing import Any, Dict

import requests
from django.conf import settings
from django.core.cache import cache

from shared.exceptions.gateway import TranslationServiceError

logger = logging.getLogger(__name__)


class NameTranslationService:
    """
    Calls the translate-name function: {arabicName} -> {translatedName}.

    Only used when the global auto_translation_enabled setting is "true";
    the portal debounces keystrokes before calling the endpoint.
    """

    TIMEOUT = 30
    CACHE_TTL = 24 * 60 * 60

    def __init__(self, endpoint=None, api_key=None):
        self.endpoint = endpoint or getattr(settings, 'TRANSLATE_NAME_URL', '')
        self.api_key = api_key if api_key is not None else getattr(settings, 'TRANSLATE_NAME_API_KEY', '')

        if not self.endpoint:
            logger.error("translate-name endpoint not configured")
            raise TranslationServiceError(
                "Translation service not configured.",
                user_friendly=True
            )

    def _make_request(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        headers = {'Content-Type': 'application/json'}
        if self.api_key:
            headers['Authorization'] = f'Bearer {self.api_key}'

        try:
            response = requests.post(
                self.endpoint,
                json=payload,
                headers=headers,
                timeout=self.TIMEOUT
            )
            response.raise_for_status()
            return response.json()

        except requests.exceptions.Timeout as e:
            logger.error("translate-name timeout")
            raise TranslationServiceError(
                "Translation service timeout. Please type the English name.",
                user_friendly=True,
                original_error=e
            )
        except requests.exceptions.ConnectionError as e:
            logger.error("translate-name connection error")
            raise TranslationServiceError(
                "Network error. Please check your connection.",
                user_friendly=True,
                original_error=e
            )
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else 'Unknown'
            logger.error(f"translate-name HTTP error {status_code}: {e}")
            raise TranslationServiceError(
                "Translation failed. Please type the English name.",
                user_friendly=True,
                original_error=e
            )
        except ValueError as e:
            logger.error(f"translate-name returned invalid JSON: {e}")
            raise TranslationServiceError(
                "Translation failed. Please type the English name.",
                user_friendly=True,
                original_error=e
            )

    def translate_name(self, arabic_name: str) -> str:
        """Return the English rendering of an Arabic name."""
        clean = (arabic_name or '').strip()
        if not clean:
            return ''

        cache_key = f"translate_name_{clean}"
        cached = cache.get(cache_key)
        if cached:
            return cached

        result = self._make_request({'arabicName': clean})
        translated = (result.get('translatedName') or '').strip()
        if not translated:
            logger.warning(f"translate-name returned no translation for '{clean}'")
            raise TranslationServiceError(
                "Translation failed. Please type the English name.",
                user_friendly=True
            )

        cache.set(cache_key, translated, self.CACHE_TTL)
        logger.debug(f"Translated name '{clean}' -> '{translated}'")
        return translated
