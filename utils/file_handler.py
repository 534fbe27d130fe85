import os
from fastapi import UploadFile, HTTPException
from config import settings

def validate_audio(file: UploadFile) -> bool:
    if file.size is not None and file.size > settings.MAX_AUDIO_SIZE:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size: {settings.MAX_AUDIO_SIZE} bytes"
        )

    file_extension = (file.filename or "").split(".")[-1].lower()
    if file_extension not in settings.ALLOWED_AUDIO_TYPES:
        raise HTTPException(
            status_code=400,
            detail=f"File type not allowed. Allowed types: {settings.ALLOWED_AUDIO_TYPES}"
        )

    return True

async def read_audio(file: UploadFile) -> bytes:
    validate_audio(file)
    content = await file.read()
    if len(content) > settings.MAX_AUDIO_SIZE:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size: {settings.MAX_AUDIO_SIZE} bytes"
        )
    if not content:
        raise HTTPException(status_code=400, detail="Audio file is empty")
    return content

def save_bytes(content: bytes, file_path: str) -> str:
    os.makedirs(os.path.dirname(file_path), exist_ok=True)

    with open(file_path, "wb") as buffer:
        buffer.write(content)

    return file_path
