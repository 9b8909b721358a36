"""Firebase Admin initialization for Cloud Storage access."""

import logging
import os

import firebase_admin
from firebase_admin import credentials, storage

from meandering.utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def get_storage_bucket(credentials_path: str, bucket_name: str):
    """
    Initialize Firebase Admin (once) and return the default storage bucket.

    Args:
        credentials_path: Path to the service-account JSON file
        bucket_name: Cloud Storage bucket name

    Returns:
        google.cloud.storage.Bucket

    Raises:
        ConfigurationError: If the bucket name or credentials are missing or unusable
    """
    if not bucket_name:
        raise ConfigurationError("Storage bucket is not configured", details="Set STORAGE_BUCKET")
    if not credentials_path or not os.path.exists(credentials_path):
        raise ConfigurationError(
            "Firebase credentials not found",
            details=f"No credentials file at '{credentials_path}'",
        )

    try:
        try:
            app = firebase_admin.get_app()
        except ValueError:
            cred = credentials.Certificate(credentials_path)
            app = firebase_admin.initialize_app(cred, {"storageBucket": bucket_name})
            logger.info(f"Firebase initialized with credentials: {credentials_path}")
        return storage.bucket(bucket_name, app=app)
    except Exception as e:
        logger.error(f"Error initializing Firebase Storage: {e}")
        raise ConfigurationError("Failed to initialize Firebase Storage", details=str(e)) from e
