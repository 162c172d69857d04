from pydantic import BaseModel


class PresignedURLResponse(BaseModel):
    """Upload slot: PUT the file to presigned_url, then store public_url on the movie"""
    presigned_url: str
    public_url: str
    object_key: str
    expires_in: int
