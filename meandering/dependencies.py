"""
Shared application dependencies.
Supports both Firebase Storage mode and local development mode.
"""

import os
from datetime import timedelta

from fastapi import Depends

from meandering.config import Settings, get_settings
from meandering.crud.audio_catalog import AudioCatalog
from meandering.services.ai.groq_service import GroqService
from meandering.services.ai.lecture_generator import LectureConfig, LectureGenerator
from meandering.services.ai.topic_proposer import TopicProposer
from meandering.services.storage.blob_store import BlobStore
from meandering.services.storage.document_store import JsonDocumentStore
from meandering.utils.exceptions import ConfigurationError
from meandering.utils.logger import get_logger

logger = get_logger(__name__)

# Global Instances
_blob_store = None
_groq_service = None
_is_local_mode = None


def _check_local_mode() -> bool:
    """Determine if we should use local mode (no Firebase)."""
    global _is_local_mode
    if _is_local_mode is not None:
        return _is_local_mode

    settings = get_settings()
    cred_path = settings.firebase_credentials_path

    if not cred_path or not os.path.exists(cred_path):
        logger.info("Firebase credentials not found - running in LOCAL DEV mode")
        _is_local_mode = True
    else:
        _is_local_mode = False

    return _is_local_mode


def get_blob_store(settings: Settings = Depends(get_settings)) -> BlobStore:
    """Get blob store - Firebase Storage in prod, LocalBucket in dev."""
    global _blob_store
    if _blob_store is not None:
        return _blob_store

    if _check_local_mode():
        from meandering.services.storage.local_store import get_local_bucket
        bucket = get_local_bucket(settings.local_storage_dir)
        logger.info(f"Using LocalBucket at {settings.local_storage_dir}")
    else:
        from meandering.services.firebase.storage_service import get_storage_bucket
        bucket = get_storage_bucket(settings.firebase_credentials_path, settings.storage_bucket)
        logger.info(f"Using Firebase Storage bucket {settings.storage_bucket}")

    _blob_store = BlobStore(bucket)
    return _blob_store


def get_document_store(blob_store: BlobStore = Depends(get_blob_store)) -> JsonDocumentStore:
    return JsonDocumentStore(blob_store)


def get_audio_catalog(
    blob_store: BlobStore = Depends(get_blob_store),
    documents: JsonDocumentStore = Depends(get_document_store),
) -> AudioCatalog:
    return AudioCatalog(blob_store, documents)


def get_signed_url_ttl(settings: Settings = Depends(get_settings)) -> timedelta:
    return timedelta(minutes=settings.signed_url_ttl_minutes)


def get_groq_service(settings: Settings = Depends(get_settings)) -> GroqService:
    """
    Get Groq service instance.

    Raises:
        ConfigurationError: If no Groq API key is configured
    """
    global _groq_service
    if _groq_service is not None:
        return _groq_service

    if not settings.groq_api_key:
        raise ConfigurationError("Groq API key is not configured", details="Set GROQ_API_KEY")

    _groq_service = GroqService(
        api_key=settings.groq_api_key,
        timeout=settings.groq_timeout,
        max_retries=settings.groq_max_retries,
        default_model=settings.groq_model,
    )
    logger.info("Groq service initialized")
    return _groq_service


def get_lecture_generator(
    groq_service: GroqService = Depends(get_groq_service),
    settings: Settings = Depends(get_settings),
) -> LectureGenerator:
    """Fresh generator per request; run state never outlives the call."""
    return LectureGenerator(groq_service, config=LectureConfig.from_settings(settings))


def get_topic_proposer(
    groq_service: GroqService = Depends(get_groq_service),
    settings: Settings = Depends(get_settings),
) -> TopicProposer:
    return TopicProposer(
        groq_service,
        max_tokens=settings.topics_max_tokens,
        temperature=settings.topics_temperature,
        model=settings.groq_model,
    )
