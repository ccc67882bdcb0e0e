# core/tests/test_translation.py
from unittest import mock

import requests
from django.core.cache import cache
from django.test import SimpleTestCase, override_settings

from shared.exceptions.gateway import TranslationServiceError
from shared.services import NameTranslationService


class NameTranslationServiceTest(SimpleTestCase):

    def setUp(self):
        cache.clear()

    def _response(self, payload, status=200):
        response = mock.Mock()
        response.status_code = status
        response.json.return_value = payload
        response.raise_for_status.return_value = None
        return response

    @mock.patch('shared.services.translation.requests.post')
    def test_translates_and_caches(self, post):
        post.return_value = self._response({'translatedName': 'Mohammed Ali'})
        service = NameTranslationService()

        self.assertEqual(service.translate_name(' محمد علي '), 'Mohammed Ali')
        self.assertEqual(service.translate_name('محمد علي'), 'Mohammed Ali')
        self.assertEqual(post.call_count, 1)
        self.assertEqual(post.call_args.kwargs['json'], {'arabicName': 'محمد علي'})
        self.assertEqual(post.call_args.kwargs['headers']['Authorization'], 'Bearer test-key')

    @mock.patch('shared.services.translation.requests.post')
    def test_timeout_is_user_friendly(self, post):
        post.side_effect = requests.exceptions.Timeout()

        with self.assertRaises(TranslationServiceError) as ctx:
            NameTranslationService().translate_name('محمد')
        self.assertTrue(ctx.exception.user_friendly)

    @mock.patch('shared.services.translation.requests.post')
    def test_empty_translation_raises(self, post):
        post.return_value = self._response({'translatedName': ''})

        with self.assertRaises(TranslationServiceError):
            NameTranslationService().translate_name('محمد')

    def test_blank_input_skips_the_call(self):
        self.assertEqual(NameTranslationService().translate_name('  '), '')

    @override_settings(TRANSLATE_NAME_URL='')
    def test_missing_endpoint(self):
        with self.assertRaises(TranslationServiceError):
            NameTranslationService()
