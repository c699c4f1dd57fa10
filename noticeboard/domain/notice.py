"""
Notice domain entity and value objects.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Generic, List, Optional, TypeVar

T = TypeVar('T')
R = TypeVar('R')


class SearchType(Enum):
    """Supported keyword search targets."""
    TITLE = "title"
    CONTENT = "content"
    TITLE_CONTENT = "titleContent"  # 제목+내용
    USER_ID = "userId"

    @classmethod
    def parse(cls, value: Optional[str]) -> 'SearchType':
        """Parse a query-string value, defaulting to title+content search.

        Raises:
            ValueError: If the value names no known search type
        """
        if not value:
            return cls.TITLE_CONTENT
        for search_type in cls:
            if search_type.value == value:
                return search_type
        raise ValueError(f"Unknown search type: {value}")


@dataclass(frozen=True)
class StoredFile:
    """File store result for a single persisted upload."""
    file_name: str
    file_path: str


@dataclass
class FileAttachment:
    """Metadata of one stored file owned by a notice."""
    file_name: str
    file_path: str
    notice_id: Optional[int] = None
    id: Optional[int] = None

    def full_path(self) -> str:
        return f"{self.file_path}/{self.file_name}"


@dataclass(frozen=True)
class NoticeCreateRequest:
    title: str
    content: str
    user_id: str


@dataclass(frozen=True)
class NoticeUpdateRequest:
    notice_id: int
    title: str
    content: str
    user_id: str


@dataclass
class Notice:
    """Notice domain entity."""
    title: str
    content: str
    user_id: str
    id: Optional[int] = None
    view_count: int = 0
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)
    files: List[FileAttachment] = field(default_factory=list)

    def __post_init__(self):
        if not self.title:
            raise ValueError("Notice title cannot be empty")
        if not self.user_id:
            raise ValueError("Notice user id cannot be empty")
        if self.view_count < 0:
            raise ValueError("View count cannot be negative")

    @classmethod
    def from_request(cls, request: NoticeCreateRequest) -> 'Notice':
        return cls(
            title=request.title,
            content=request.content,
            user_id=request.user_id
        )

    def increment_views(self) -> None:
        self.view_count += 1

    def update_details(self, title: str, content: str) -> None:
        """제목과 본문 수정. 작성자(user_id)는 변경하지 않는다."""
        if not title:
            raise ValueError("Notice title cannot be empty")
        self.title = title
        self.content = content
        self.updated_at = datetime.now()

    def is_owned_by(self, user_id: Optional[str]) -> bool:
        return self.user_id == user_id

    def add_files(self, stored_files: List[StoredFile]) -> None:
        """Attach stored files, keeping upload order."""
        for stored in stored_files:
            self.files.append(FileAttachment(
                file_name=stored.file_name,
                file_path=stored.file_path,
                notice_id=self.id
            ))


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of a paginated query result.

    Attributes:
        items: Items on this page
        page: Page number (1-based)
        size: Requested page size
        total: Total number of matching items across all pages
    """
    items: List[T]
    page: int
    size: int
    total: int

    @property
    def total_pages(self) -> int:
        if self.size <= 0:
            return 0
        return (self.total + self.size - 1) // self.size

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    def map(self, fn: Callable[[T], R]) -> 'Page[R]':
        return Page(
            items=[fn(item) for item in self.items],
            page=self.page,
            size=self.size,
            total=self.total
        )
