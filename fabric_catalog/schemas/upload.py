from pydantic import Field

from fabric_catalog.schemas.fabric import CamelModel


class UploadAuthorization(CamelModel):
    user_id: str
    max_file_size_mb: int
    max_file_count: int


class UploadComplete(CamelModel):
    url: str = Field(min_length=1)


class UploadCompleteResponse(CamelModel):
    uploaded_file_url: str
