"""
In-memory notice storage.

Entities are copied on the way in and out so callers never mutate stored
state outside a save. Transactions snapshot both tables and restore them
on rollback.
"""
import copy
import itertools
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from ..domain.notice import FileAttachment, Notice, Page, SearchType
from ..domain.notice_repository import FileAttachmentRepository, NoticeRepository, TransactionManager


class InMemoryStore(TransactionManager):
    """Tables shared by the in-memory repositories."""

    def __init__(self):
        self.notices: Dict[int, Notice] = {}
        self.attachments: Dict[int, FileAttachment] = {}
        self._notice_ids = itertools.count(1)
        self._attachment_ids = itertools.count(1)
        self._lock = threading.RLock()

    def next_notice_id(self) -> int:
        return next(self._notice_ids)

    def next_attachment_id(self) -> int:
        return next(self._attachment_ids)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            notices = copy.deepcopy(self.notices)
            attachments = copy.deepcopy(self.attachments)
            try:
                yield
            except Exception:
                self.notices = notices
                self.attachments = attachments
                raise


class InMemoryNoticeRepository(NoticeRepository):
    """Dictionary-backed notice repository."""

    def __init__(self, store: InMemoryStore):
        self.store = store

    def find_by_id(self, notice_id: int) -> Optional[Notice]:
        notice = self.store.notices.get(notice_id)
        if notice is None:
            return None
        found = copy.deepcopy(notice)
        found.files = self._attachments_of(notice_id)
        return found

    def save(self, notice: Notice) -> Notice:
        if notice.id is None:
            notice.id = self.store.next_notice_id()
        self._persist_new_attachments(notice)

        stored = copy.deepcopy(notice)
        stored.files = []
        self.store.notices[notice.id] = stored
        return notice

    def delete(self, notice: Notice) -> None:
        for attachment_id, attachment in list(self.store.attachments.items()):
            if attachment.notice_id == notice.id:
                del self.store.attachments[attachment_id]
        self.store.notices.pop(notice.id, None)

    def update_notice(self, notice: Notice) -> None:
        if notice.id not in self.store.notices:
            raise KeyError(f"Notice {notice.id} does not exist")
        self.save(notice)

    def get_notice_search(
        self,
        search_type: SearchType,
        keyword: Optional[str],
        page: int = 1,
        per_page: int = 10
    ) -> Page[Notice]:
        matched = [
            n for n in self.store.notices.values()
            if self._matches(n, search_type, keyword)
        ]
        matched.sort(key=lambda n: (n.created_at, n.id), reverse=True)

        start = (page - 1) * per_page
        end = start + per_page
        items = []
        for notice in matched[start:end]:
            found = copy.deepcopy(notice)
            found.files = self._attachments_of(notice.id)
            items.append(found)

        return Page(items=items, page=page, size=per_page, total=len(matched))

    def _persist_new_attachments(self, notice: Notice) -> None:
        for attachment in notice.files:
            attachment.notice_id = notice.id
            if attachment.id is None:
                attachment.id = self.store.next_attachment_id()
                self.store.attachments[attachment.id] = copy.deepcopy(attachment)

    def _attachments_of(self, notice_id: int) -> List[FileAttachment]:
        return [
            copy.deepcopy(a)
            for a in sorted(self.store.attachments.values(), key=lambda a: a.id)
            if a.notice_id == notice_id
        ]

    @staticmethod
    def _matches(notice: Notice, search_type: SearchType, keyword: Optional[str]) -> bool:
        if not keyword:
            return True
        if search_type == SearchType.TITLE:
            return keyword in notice.title
        if search_type == SearchType.CONTENT:
            return keyword in (notice.content or '')
        if search_type == SearchType.USER_ID:
            return keyword in notice.user_id
        return keyword in notice.title or keyword in (notice.content or '')


class InMemoryFileAttachmentRepository(FileAttachmentRepository):

    def __init__(self, store: InMemoryStore):
        self.store = store

    def delete_all(self, attachments: List[FileAttachment]) -> None:
        for attachment in attachments:
            if attachment.id is not None:
                self.store.attachments.pop(attachment.id, None)
