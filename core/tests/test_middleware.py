# core/tests/test_middleware.py
import json

from django.http import HttpResponse, Http404
from django.test import SimpleTestCase, RequestFactory

from core.exceptions import DuplicateEmailError, ConfigurationError
from core.middleware import ExceptionHandlingMiddleware, SecurityHeadersMiddleware


class ExceptionHandlingMiddlewareTest(SimpleTestCase):
    def setUp(self):
        self.factory = RequestFactory()
        self.middleware = ExceptionHandlingMiddleware(lambda r: HttpResponse())

    def test_business_exception_becomes_json(self):
        request = self.factory.post('/registration/submit/')
        response = self.middleware.process_exception(request, DuplicateEmailError())

        self.assertEqual(response.status_code, 409)
        payload = json.loads(response.content)
        self.assertEqual(payload['code'], 'DUPLICATE_EMAIL')
        self.assertIn('already registered', payload['error'])

    def test_internal_messages_are_hidden(self):
        request = self.factory.get('/api/config/')
        response = self.middleware.process_exception(request, ConfigurationError("row 12 is broken"))

        payload = json.loads(response.content)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(payload['error'], 'Operation failed.')
        self.assertEqual(payload['code'], 'CONFIG_ERROR')

    def test_unexpected_error_is_500(self):
        request = self.factory.get('/api/config/')
        response = self.middleware.process_exception(request, RuntimeError("boom"))

        self.assertEqual(response.status_code, 500)
        self.assertEqual(json.loads(response.content)['code'], 'SERVER_ERROR')

    def test_http404_is_left_to_django(self):
        request = self.factory.get('/missing/')
        self.assertIsNone(self.middleware.process_exception(request, Http404()))


class SecurityHeadersMiddlewareTest(SimpleTestCase):
    def setUp(self):
        self.factory = RequestFactory()
        self.middleware = SecurityHeadersMiddleware(lambda r: HttpResponse())

    def test_headers_added(self):
        response = self.middleware(self.factory.get('/health/'))

        self.assertEqual(response['X-Content-Type-Options'], 'nosniff')
        self.assertEqual(response['X-Frame-Options'], 'DENY')
        self.assertFalse(response.has_header('Cache-Control'))

    def test_artifacts_are_not_cached(self):
        response = self.middleware(self.factory.get('/artifacts/abc/'))
        self.assertEqual(response['Cache-Control'], 'private, no-store')
