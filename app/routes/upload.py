from fastapi import APIRouter, Depends, HTTPException, Query, status
from app.schemas.upload import PresignedURLResponse
from app.services.storage_service import (
    DEFAULT_CONTENT_TYPE,
    PRESIGNED_URL_EXPIRY,
    StorageError,
    StorageService,
    get_storage_service,
)
from app.utils.response import success_response

router = APIRouter(prefix="/api/v1/upload", tags=["Upload"])


@router.get("/presign")
def get_presigned_url(
    filename: str = Query("", description="Client file name, e.g. poster.jpg"),
    content_type: str = Query(DEFAULT_CONTENT_TYPE, alias="contentType", description="MIME type of the upload"),
    storage: StorageService = Depends(get_storage_service)
):
    """
    Issue a 15 minute PUT URL for a poster or backdrop

    The client uploads with the same Content-Type, then stores public_url
    as the movie's poster_path or backdrop_path.
    """
    filename = filename.strip()
    if not filename:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="filename is required"
        )

    try:
        presigned_url, public_url, object_key = storage.generate_presigned_url(
            filename, content_type or DEFAULT_CONTENT_TYPE
        )
    except StorageError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to generate upload URL: {str(e)}"
        )

    return success_response(
        status.HTTP_200_OK,
        "Presigned URL generated successfully",
        data=PresignedURLResponse(
            presigned_url=presigned_url,
            public_url=public_url,
            object_key=object_key,
            expires_in=PRESIGNED_URL_EXPIRY,
        ),
    )
