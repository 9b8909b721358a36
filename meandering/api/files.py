"""Audio file and catalog management endpoints."""

from datetime import timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from meandering.crud.audio_catalog import HISTORY_CATEGORIES, AudioCatalog
from meandering.dependencies import get_audio_catalog, get_signed_url_ttl
from meandering.schemas.file_schema import (
    AudioFileListResponse,
    CategoryResponse,
    SignedUrlRequest,
    SignedUrlResponse,
    ToggleNewRequest,
    UpdateCategoryRequest,
    UpdateImageRequest,
    UpdateJsonRequest,
)
from meandering.utils.exceptions import ValidationError
from meandering.utils.logger import get_logger

logger = get_logger(__name__)
router = APIRouter()


@router.get(
    "",
    response_model=AudioFileListResponse,
    status_code=status.HTTP_200_OK,
    summary="List audio files",
)
def list_files(catalog: AudioCatalog = Depends(get_audio_catalog)) -> dict:
    """List .mp3, .wav, .m4a and .ogg objects in the bucket."""
    files = [
        {
            "name": blob.name,
            "size": blob.size,
            "contentType": blob.content_type,
            "updated": blob.updated,
            "url": blob.url,
        }
        for blob in catalog.list_audio_files()
    ]
    return {"files": files}


@router.delete(
    "",
    status_code=status.HTTP_200_OK,
    summary="Delete an audio file",
)
def delete_file(
    file_name: str = Query(..., alias="fileName", description="Object name to delete"),
    catalog: AudioCatalog = Depends(get_audio_catalog),
) -> dict:
    """Delete an audio file and its catalog entry."""
    catalog.delete_file(file_name)
    return {"message": "File deleted successfully", "fileName": file_name}


@router.get(
    "/categories",
    response_model=List[CategoryResponse],
    status_code=status.HTTP_200_OK,
    summary="List History categories",
)
def list_categories() -> list:
    return HISTORY_CATEGORIES


@router.post(
    "/upload",
    status_code=status.HTTP_200_OK,
    summary="Upload an MP3 and add it to its catalog",
)
def upload_file(
    file: Optional[UploadFile] = File(None),
    title: Optional[str] = Form(None),
    folder: Optional[str] = Form(None),
    gender: Optional[str] = Form(None),
    topic: Optional[str] = Form(None),
    voice_name: Optional[str] = Form(None, alias="voiceName"),
    catalog: AudioCatalog = Depends(get_audio_catalog),
) -> dict:
    """
    Upload an audio file through the API.

    History uploads (``folder=boringhistory``) are numbered HIST###;
    Meandering uploads get a random id encoding topic and gender.
    """
    if file is None:
        raise ValidationError("No file provided")

    data = file.file.read()
    result = catalog.upload(
        file_name=file.filename or "",
        data=data,
        title=title or "",
        folder=folder,
        gender=gender,
        topic=topic,
        voice_name=voice_name,
    )
    logger.info(f"Uploaded '{result['file']['name']}' ({len(data)} bytes)")
    return {"message": "File uploaded successfully", **result}


@router.post(
    "/signed-url",
    response_model=SignedUrlResponse,
    status_code=status.HTTP_200_OK,
    summary="Get a signed URL for direct upload",
)
def create_signed_url(
    request: SignedUrlRequest,
    catalog: AudioCatalog = Depends(get_audio_catalog),
    ttl: timedelta = Depends(get_signed_url_ttl),
) -> dict:
    """Allocate an upload path and sign a PUT to it for large files."""
    return catalog.signed_upload(
        title=request.title or "",
        ttl=ttl,
        folder=request.folder,
        gender=request.gender,
        topic=request.topic,
    )


@router.post(
    "/update-json",
    status_code=status.HTTP_200_OK,
    summary="Register a directly uploaded file",
)
def update_json(
    request: UpdateJsonRequest,
    catalog: AudioCatalog = Depends(get_audio_catalog),
) -> dict:
    """Make a signed-URL upload public and add its catalog entry."""
    entry = catalog.register_upload(
        entry_id=request.id or "",
        upload_path=request.upload_path or "",
        folder=request.folder,
        title=request.title,
        gender=request.gender,
        topic=request.topic,
        voice_name=request.voice_name,
        is_new=request.is_new,
    )
    return {"message": "JSON updated successfully", "jsonEntry": entry}


@router.post(
    "/toggle-new",
    status_code=status.HTTP_200_OK,
    summary="Mark a History entry as new",
)
def toggle_new(
    request: ToggleNewRequest,
    catalog: AudioCatalog = Depends(get_audio_catalog),
) -> dict:
    catalog.toggle_new(request.file_name or "", request.is_new)
    return {"message": "New status updated successfully", "isNew": request.is_new}


@router.post(
    "/update-category",
    status_code=status.HTTP_200_OK,
    summary="Set the category of a History entry",
)
def update_category(
    request: UpdateCategoryRequest,
    catalog: AudioCatalog = Depends(get_audio_catalog),
) -> dict:
    catalog.update_category(request.file_name or "", request.category)
    return {"message": "Category updated successfully", "category": request.category}


@router.post(
    "/update-image",
    status_code=status.HTTP_200_OK,
    summary="Set or clear the image of a History entry",
)
def update_image(
    request: UpdateImageRequest,
    catalog: AudioCatalog = Depends(get_audio_catalog),
) -> dict:
    catalog.update_image(request.file_name or "", request.image_url)
    return {"success": True, "imageUrl": request.image_url}
