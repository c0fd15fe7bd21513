from fastapi import APIRouter, File, HTTPException, UploadFile
from fastapi.responses import FileResponse
from typing import Optional
from ..configs import MAX_UPLOAD_BYTES
from ..services import UploadService, UploadTooLargeError
from ..schemas import UploadResponse

router = APIRouter(tags=["Upload"])

@router.post("", response_model=UploadResponse, status_code=201)
async def upload_file(file: Optional[UploadFile] = File(default=None)):
    """
    Upload một file (trường multipart 'file', tối đa 10MB).
    Trả về URL công khai cùng data URL của nội dung.
    """
    if file is None:
        raise HTTPException(status_code=400, detail="Không có file được upload.")

    # Đọc tối đa giới hạn + 1 byte: đủ để phát hiện file quá lớn
    data = await file.read(MAX_UPLOAD_BYTES + 1)
    try:
        return await UploadService.save_upload(data, file.filename, file.content_type)
    except UploadTooLargeError as e:
        raise HTTPException(status_code=413, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.get("/{stored_name}")
async def get_uploaded_file(stored_name: str):
    try:
        path = UploadService.resolve_stored_file(stored_name)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return FileResponse(path)
