"""
Response views produced by the notice service.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..domain.notice import FileAttachment, Notice


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class FileView:
    id: Optional[int]
    file_name: str
    file_path: str

    @classmethod
    def from_attachment(cls, attachment: FileAttachment) -> 'FileView':
        return cls(
            id=attachment.id,
            file_name=attachment.file_name,
            file_path=attachment.file_path
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'fileName': self.file_name,
            'filePath': self.file_path
        }


@dataclass(frozen=True)
class NoticeCreateResult:
    notice_id: int
    title: str
    created_at: datetime

    @classmethod
    def from_notice(cls, notice: Notice) -> 'NoticeCreateResult':
        return cls(notice_id=notice.id, title=notice.title, created_at=notice.created_at)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'noticeId': self.notice_id,
            'title': self.title,
            'createdAt': _isoformat(self.created_at)
        }


@dataclass(frozen=True)
class NoticeUpdateResult:
    notice_id: int
    title: str
    updated_at: datetime

    @classmethod
    def from_notice(cls, notice: Notice) -> 'NoticeUpdateResult':
        return cls(notice_id=notice.id, title=notice.title, updated_at=notice.updated_at)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'noticeId': self.notice_id,
            'title': self.title,
            'updatedAt': _isoformat(self.updated_at)
        }


@dataclass(frozen=True)
class NoticeDetail:
    """공지사항 상세 조회 결과 (증가된 조회수 포함)."""
    id: int
    title: str
    content: str
    user_id: str
    view_count: int
    created_at: datetime
    updated_at: datetime
    files: List[FileView]

    @classmethod
    def from_notice(cls, notice: Notice) -> 'NoticeDetail':
        return cls(
            id=notice.id,
            title=notice.title,
            content=notice.content,
            user_id=notice.user_id,
            view_count=notice.view_count,
            created_at=notice.created_at,
            updated_at=notice.updated_at,
            files=[FileView.from_attachment(f) for f in notice.files]
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'content': self.content,
            'userId': self.user_id,
            'viewCount': self.view_count,
            'createdAt': _isoformat(self.created_at),
            'updatedAt': _isoformat(self.updated_at),
            'files': [f.to_dict() for f in self.files]
        }


@dataclass(frozen=True)
class NoticeSummary:
    """Search result row."""
    id: int
    title: str
    user_id: str
    view_count: int
    created_at: datetime
    file_count: int

    @classmethod
    def from_notice(cls, notice: Notice) -> 'NoticeSummary':
        return cls(
            id=notice.id,
            title=notice.title,
            user_id=notice.user_id,
            view_count=notice.view_count,
            created_at=notice.created_at,
            file_count=len(notice.files)
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'userId': self.user_id,
            'viewCount': self.view_count,
            'createdAt': _isoformat(self.created_at),
            'fileCount': self.file_count
        }
