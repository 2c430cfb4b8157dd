"""
RecipeBox Backend: Image Upload Routes
========================================

What:  Accepts recipe images and serves them back.

    POST /upload              multipart field "image" → 200 {imageUrl}
    GET  /uploads/{filename}  stored bytes, content type from the extension

No token is required for either route.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import FileResponse

from recipebox.dependencies import get_file_service
from recipebox.exceptions import ValidationError
from recipebox.schemas.common import ErrorResponse
from recipebox.schemas.upload import UploadResponse
from recipebox.services.file_service import FileService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Uploads"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={
        400: {"description": "No file uploaded or file too large", "model": ErrorResponse},
        500: {"description": "File could not be written", "model": ErrorResponse},
    },
    summary="Upload a recipe image",
)
async def upload_image(
    image: Optional[UploadFile] = File(default=None, description="Image file"),
    file_service: FileService = Depends(get_file_service),
) -> UploadResponse:
    if image is None or not image.filename:
        raise ValidationError(message="No file uploaded")

    try:
        content = await image.read()
        logger.info(
            "Received upload: filename=%s, size=%d bytes",
            image.filename,
            len(content),
        )
        filename = await file_service.store(image.filename, content)
    finally:
        await image.close()

    return UploadResponse(image_url=file_service.image_url(filename))


@router.get(
    "/uploads/{filename}",
    responses={
        200: {"description": "Image file"},
        404: {"description": "File not found", "model": ErrorResponse},
    },
    summary="Serve an uploaded image",
)
async def serve_upload(
    filename: str,
    file_service: FileService = Depends(get_file_service),
) -> FileResponse:
    path = file_service.resolve(filename)
    # media type is guessed from the extension
    return FileResponse(path=str(path), headers={"Cache-Control": "public, max-age=86400"})
