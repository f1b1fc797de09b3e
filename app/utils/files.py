# app/utils/files.py

import math
import uuid
import logging
from pathlib import Path

import aiofiles
from fastapi import UploadFile, HTTPException, status

from app.core.config import settings

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".heic", ".pdf"}


async def save_upload_file(sub_dir: str, upload_file: UploadFile) -> tuple[str, int]:
    """
    업로드된 파일을 UPLOAD_DIR 하위의 지정된 경로에 비동기로 저장합니다.

    - 파일명은 중복을 피하기 위해 UUID를 사용하여 새로 생성합니다.
    - 빈 파일이나 지원하지 않는 확장자는 400 에러를 발생시킵니다.

    Args:
        sub_dir (str): UPLOAD_DIR 아래에 생성할 하위 디렉토리 (예: "reception/12")
        upload_file (UploadFile): FastAPI를 통해 업로드된 파일 객체

    Returns:
        tuple[str, int]: (UPLOAD_DIR 기준 상대 경로, 파일 크기 KB)
    """
    file_extension = Path(upload_file.filename or "").suffix.lower()
    if file_extension not in ALLOWED_IMAGE_EXTENSIONS:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Tip de fisier neacceptat.")

    # settings 값은 런타임에 참조합니다 (테스트에서 monkeypatch 가능).
    upload_dir = Path(settings.UPLOAD_DIR) / sub_dir
    upload_dir.mkdir(parents=True, exist_ok=True)

    file_content = await upload_file.read()
    if not file_content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Fisierul incarcat este gol.")

    new_filename = f"{uuid.uuid4()}{file_extension}"
    async with aiofiles.open(upload_dir / new_filename, "wb") as f:
        await f.write(file_content)

    relative_path = f"{sub_dir}/{new_filename}"
    logger.info("Saved upload %s (%d bytes)", relative_path, len(file_content))
    return relative_path, math.ceil(len(file_content) / 1024)


def delete_upload_file(relative_path: str) -> bool:
    """UPLOAD_DIR 기준 상대 경로의 파일을 삭제합니다. 파일이 없으면 False."""
    full_path = Path(settings.UPLOAD_DIR) / relative_path
    if not full_path.exists():
        return False
    full_path.unlink()
    return True
