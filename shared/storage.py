# shared/storage.py
"""
Private artifact buckets (signatures, billing PDFs) on Django's storage API.
Files are never served directly; callers hand out short-lived signed URLs.
"""
import base64
import binascii
import logging
import uuid

from django.conf import settings
from django.core import signing
from django.core.files.base import ContentFile
from django.core.files.storage import default_storage
from django.urls import reverse
from django.utils import timezone

from shared.constants import SIGNATURES_BUCKET, BILLING_PDFS_BUCKET
from shared.exceptions.gateway import ArtifactStorageError, InvalidArtifactTokenError

logger = logging.getLogger(__name__)

SIGNER_SALT = 'institute.artifacts'


class ArtifactStorage:
    """Upload/download helpers for the private buckets."""

    BUCKETS = (SIGNATURES_BUCKET, BILLING_PDFS_BUCKET)

    def __init__(self, storage=None):
        self.storage = storage or default_storage

    def _path(self, bucket, name):
        if bucket not in self.BUCKETS:
            raise ArtifactStorageError(f"Unknown bucket: {bucket}")
        return f"{bucket}/{name}"

    def upload(self, bucket, name, content: bytes) -> str:
        """Store bytes and return the storage path."""
        path = self._path(bucket, name)
        try:
            saved = self.storage.save(path, ContentFile(content))
        except OSError as e:
            logger.error(f"Upload to {bucket} failed: {e}", exc_info=True)
            raise ArtifactStorageError("Failed to store file.", user_friendly=True, original_error=e)

        logger.info(f"Stored artifact {saved} ({len(content)} bytes)")
        return saved

    def upload_signature(self, owner_id, signature) -> str:
        """Store a PNG signature (raw bytes or a data URL) under the owner's folder."""
        content = decode_data_url(signature) if isinstance(signature, str) else signature
        if not content:
            raise ArtifactStorageError("Signature is empty.", user_friendly=True)

        stamp = int(timezone.now().timestamp() * 1000)
        return self.upload(SIGNATURES_BUCKET, f"{owner_id}/signature_{stamp}.png", content)

    def upload_billing_pdf(self, owner_id, pdf_bytes: bytes, language='en') -> str:
        stamp = int(timezone.now().timestamp() * 1000)
        return self.upload(BILLING_PDFS_BUCKET, f"{owner_id}/billing_{language}_{stamp}.pdf", pdf_bytes)

    def read(self, path) -> bytes:
        with self.storage.open(path, 'rb') as fh:
            return fh.read()

    def exists(self, path) -> bool:
        return self.storage.exists(path)

    # ============ SIGNED URLS ============

    @staticmethod
    def make_token(path) -> str:
        return signing.dumps({'path': path, 'nonce': uuid.uuid4().hex[:8]}, salt=SIGNER_SALT, compress=True)

    @staticmethod
    def resolve_token(token, max_age=None) -> str:
        """Return the storage path for a token or raise InvalidArtifactTokenError."""
        max_age = max_age if max_age is not None else getattr(settings, 'ARTIFACT_URL_MAX_AGE', 3600)
        try:
            value = signing.loads(token, salt=SIGNER_SALT, max_age=max_age)
        except signing.SignatureExpired:
            raise InvalidArtifactTokenError("Link expired")
        except signing.BadSignature:
            raise InvalidArtifactTokenError("Invalid link")
        return value['path']

    def signed_url(self, path) -> str:
        return reverse('artifact_download', kwargs={'token': self.make_token(path)})


def decode_data_url(data_url: str) -> bytes:
    """Decode 'data:image/png;base64,...' (or bare base64) into bytes."""
    if not data_url:
        return b''
    payload = data_url.split(',', 1)[1] if data_url.startswith('data:') else data_url
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise ArtifactStorageError("Signature is not valid base64 image data.", user_friendly=True)
