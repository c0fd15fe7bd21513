import asyncio
import logging
import cloudinary.uploader

logger = logging.getLogger(__name__)

async def upload_to_cloudinary(data: bytes, filename: str, folder: str = "blogchat_uploads"):
    """
    Upload 1 file lên Cloudinary.
    Tự động xác định loại (resource_type="auto").
    """
    try:
        result = await asyncio.to_thread(
            cloudinary.uploader.upload,
            data,
            resource_type="auto",  # cho phép image, video, file thô
            folder=folder,
            filename_override=filename,
            use_filename=True,
        )
        return {
            "url": result["secure_url"],
            "public_id": result["public_id"],
            "resource_type": result["resource_type"],
            "format": result.get("format"),
            "bytes": result.get("bytes")
        }
    except Exception as e:
        logger.error("Upload to Cloudinary failed: %s", e)
        raise
