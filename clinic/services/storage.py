"""
Signed download URLs from the S3-compatible object store.

Uploads happen directly between the client and the store; this service
only signs short-lived GET URLs for paths already recorded on a row.
"""
import logging

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from django.conf import settings
from rest_framework.exceptions import NotFound

from ..exceptions import StorageUnavailable

logger = logging.getLogger(__name__)


def get_client():
    return boto3.client(
        's3',
        endpoint_url=settings.STORAGE_ENDPOINT_URL,
        region_name=settings.STORAGE_REGION,
        aws_access_key_id=settings.STORAGE_ACCESS_KEY_ID,
        aws_secret_access_key=settings.STORAGE_SECRET_ACCESS_KEY,
        config=Config(signature_version='s3v4', s3={'addressing_style': 'path'}),
    )


def signed_url(path, *, expires_in=None) -> str:
    if not path:
        raise NotFound('No attachment stored')
    try:
        return get_client().generate_presigned_url(
            'get_object',
            Params={'Bucket': settings.STORAGE_BUCKET, 'Key': path},
            ExpiresIn=expires_in or settings.SIGNED_URL_TTL_SECONDS,
        )
    except (BotoCoreError, ClientError) as exc:
        logger.warning('could not sign %s: %s', path, exc)
        raise StorageUnavailable(str(exc)) from exc
