from pydantic import BaseModel

class UploadResponse(BaseModel):
    url: str
    name: str
    dataUrl: str
    contentType: str
    size: int
