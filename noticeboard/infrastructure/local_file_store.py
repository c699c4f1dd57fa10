"""
Local disk file store for notice attachments.
"""
import os
import uuid
from datetime import datetime
from typing import Any, Iterable, List, Optional, Sequence

from werkzeug.utils import secure_filename

from ..domain.file_store import FileStore
from ..domain.notice import StoredFile
from ..logging_config import get_logger

logger = get_logger(__name__)


class LocalFileStore(FileStore):
    """Saves uploads under <upload_root>/<YYYYMMDD>/<uuid>_<name>."""

    def __init__(
        self,
        upload_root: str,
        max_size_bytes: Optional[int] = None,
        allowed_extensions: Optional[Iterable[str]] = None
    ):
        """Initialize the store.

        Args:
            upload_root: Base directory for stored files
            max_size_bytes: Largest accepted upload, unlimited when None
            allowed_extensions: Accepted extensions without dot, any when None
        """
        self.upload_root = upload_root
        self.max_size_bytes = max_size_bytes
        self.allowed_extensions = (
            {ext.strip().lower() for ext in allowed_extensions} if allowed_extensions else None
        )

    def save_files(self, files: Sequence[Any]) -> List[StoredFile]:
        uploads = [f for f in files if f is not None and f.filename]
        for upload in uploads:
            self._validate(upload)

        directory = os.path.join(self.upload_root, datetime.now().strftime('%Y%m%d'))
        os.makedirs(directory, exist_ok=True)

        stored_files = []
        for upload in uploads:
            stored_name = f"{uuid.uuid4().hex}_{self._safe_name(upload.filename)}"
            upload.save(os.path.join(directory, stored_name))
            stored_files.append(StoredFile(file_name=stored_name, file_path=directory))
            logger.debug(f"파일 저장: {directory}/{stored_name}")

        return stored_files

    def delete_files(self, paths: List[str]) -> None:
        for path in paths:
            try:
                os.remove(path)
            except FileNotFoundError:
                logger.warning(f"삭제할 파일이 없습니다: {path}")

    def _validate(self, upload: Any) -> None:
        extension = self._extension(upload.filename)
        if self.allowed_extensions is not None and extension not in self.allowed_extensions:
            raise ValueError(f"허용되지 않은 파일 형식입니다: {upload.filename}")

        if self.max_size_bytes is not None:
            size = self._size_of(upload)
            if size > self.max_size_bytes:
                raise ValueError(
                    f"파일 크기가 제한({self.max_size_bytes} bytes)을 초과합니다: {upload.filename}"
                )

    @staticmethod
    def _size_of(upload: Any) -> int:
        stream = upload.stream
        stream.seek(0, os.SEEK_END)
        size = stream.tell()
        stream.seek(0)
        return size

    @staticmethod
    def _extension(filename: str) -> str:
        if '.' not in filename:
            return ''
        return filename.rsplit('.', 1)[1].lower()

    def _safe_name(self, filename: str) -> str:
        # secure_filename은 한글 등 비ASCII 문자를 제거한다
        safe_name = secure_filename(filename)
        extension = self._extension(filename)
        suffix = f".{extension}" if extension else ''
        if not safe_name or not safe_name.lower().endswith(suffix):
            safe_name = f"file{suffix}"
        return safe_name
