"""
Relational notice storage on SQLAlchemy Core.

Each repository call runs on the connection of the transaction opened
by SqlAlchemyDatabase.transaction() in the current thread.
"""
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    delete,
    func,
    insert,
    or_,
    select,
    update,
)
from sqlalchemy.engine import Connection
from sqlalchemy.pool import StaticPool

from ..domain.notice import FileAttachment, Notice, Page, SearchType
from ..domain.notice_repository import FileAttachmentRepository, NoticeRepository, TransactionManager
from ..logging_config import get_logger

logger = get_logger(__name__)

metadata = MetaData()

notices_table = Table(
    "notices",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String(255), nullable=False),
    Column("content", Text, nullable=False, default=""),
    Column("user_id", String(100), nullable=False, index=True),
    Column("view_count", Integer, nullable=False, default=0),
    Column("created_at", DateTime, nullable=False),
    Column("updated_at", DateTime, nullable=False),
)

notice_files_table = Table(
    "notice_files",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("notice_id", Integer, ForeignKey("notices.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("file_name", String(255), nullable=False),
    Column("file_path", String(500), nullable=False),
)

IN_MEMORY_SQLITE_URLS = ("sqlite://", "sqlite:///:memory:")


class SqlAlchemyDatabase(TransactionManager):
    """Engine holder and per-thread transaction scope."""

    def __init__(self, database_url: str, echo: bool = False):
        engine_args: Dict[str, Any] = {"echo": echo}
        if database_url.startswith("sqlite"):
            engine_args["connect_args"] = {"check_same_thread": False}
            if database_url in IN_MEMORY_SQLITE_URLS:
                engine_args["poolclass"] = StaticPool

        self.engine = create_engine(database_url, **engine_args)
        self._local = threading.local()

    def create_tables(self) -> None:
        metadata.create_all(self.engine)
        logger.info(f"Tables ready: {', '.join(metadata.tables)}")

    def dispose(self) -> None:
        self.engine.dispose()

    @contextmanager
    def transaction(self) -> Iterator[Connection]:
        current = getattr(self._local, "connection", None)
        if current is not None:
            # 이미 열린 트랜잭션에 참여
            yield current
            return

        with self.engine.begin() as connection:
            self._local.connection = connection
            try:
                yield connection
            finally:
                self._local.connection = None

    @property
    def connection(self) -> Connection:
        connection = getattr(self._local, "connection", None)
        if connection is None:
            raise RuntimeError("No active transaction")
        return connection


class SqlAlchemyNoticeRepository(NoticeRepository):
    """Notice repository backed by a relational database."""

    def __init__(self, database: SqlAlchemyDatabase):
        self.database = database

    def find_by_id(self, notice_id: int) -> Optional[Notice]:
        row = self.database.connection.execute(
            select(notices_table).where(notices_table.c.id == notice_id)
        ).mappings().first()
        if row is None:
            return None

        files = self._load_files([notice_id]).get(notice_id, [])
        return self._to_notice(row, files)

    def save(self, notice: Notice) -> Notice:
        connection = self.database.connection
        values = self._to_row(notice)

        if notice.id is None:
            result = connection.execute(insert(notices_table).values(**values))
            notice.id = result.inserted_primary_key[0]
        else:
            connection.execute(
                update(notices_table).where(notices_table.c.id == notice.id).values(**values)
            )

        self._persist_new_attachments(notice)
        return notice

    def delete(self, notice: Notice) -> None:
        connection = self.database.connection
        connection.execute(
            delete(notice_files_table).where(notice_files_table.c.notice_id == notice.id)
        )
        connection.execute(delete(notices_table).where(notices_table.c.id == notice.id))

    def update_notice(self, notice: Notice) -> None:
        result = self.database.connection.execute(
            update(notices_table)
            .where(notices_table.c.id == notice.id)
            .values(**self._to_row(notice))
        )
        if result.rowcount == 0:
            raise LookupError(f"Notice {notice.id} does not exist")

        self._persist_new_attachments(notice)

    def get_notice_search(
        self,
        search_type: SearchType,
        keyword: Optional[str],
        page: int = 1,
        per_page: int = 10
    ) -> Page[Notice]:
        connection = self.database.connection
        condition = self._search_condition(search_type, keyword)

        count_query = select(func.count()).select_from(notices_table)
        query = select(notices_table)
        if condition is not None:
            count_query = count_query.where(condition)
            query = query.where(condition)

        total = connection.execute(count_query).scalar_one()
        rows = connection.execute(
            query.order_by(notices_table.c.created_at.desc(), notices_table.c.id.desc())
            .limit(per_page)
            .offset((page - 1) * per_page)
        ).mappings().all()

        files_by_notice = self._load_files([row["id"] for row in rows])
        items = [self._to_notice(row, files_by_notice.get(row["id"], [])) for row in rows]

        return Page(items=items, page=page, size=per_page, total=total)

    def _persist_new_attachments(self, notice: Notice) -> None:
        connection = self.database.connection
        for attachment in notice.files:
            attachment.notice_id = notice.id
            if attachment.id is None:
                result = connection.execute(
                    insert(notice_files_table).values(
                        notice_id=notice.id,
                        file_name=attachment.file_name,
                        file_path=attachment.file_path
                    )
                )
                attachment.id = result.inserted_primary_key[0]

    def _load_files(self, notice_ids: List[int]) -> Dict[int, List[FileAttachment]]:
        if not notice_ids:
            return {}

        rows = self.database.connection.execute(
            select(notice_files_table)
            .where(notice_files_table.c.notice_id.in_(notice_ids))
            .order_by(notice_files_table.c.id)
        ).mappings().all()

        files: Dict[int, List[FileAttachment]] = {}
        for row in rows:
            files.setdefault(row["notice_id"], []).append(FileAttachment(
                id=row["id"],
                notice_id=row["notice_id"],
                file_name=row["file_name"],
                file_path=row["file_path"]
            ))
        return files

    @staticmethod
    def _search_condition(search_type: SearchType, keyword: Optional[str]):
        if not keyword:
            return None
        if search_type == SearchType.TITLE:
            return notices_table.c.title.contains(keyword, autoescape=True)
        if search_type == SearchType.CONTENT:
            return notices_table.c.content.contains(keyword, autoescape=True)
        if search_type == SearchType.USER_ID:
            return notices_table.c.user_id.contains(keyword, autoescape=True)
        return or_(
            notices_table.c.title.contains(keyword, autoescape=True),
            notices_table.c.content.contains(keyword, autoescape=True)
        )

    @staticmethod
    def _to_row(notice: Notice) -> Dict[str, Any]:
        return {
            "title": notice.title,
            "content": notice.content or "",
            "user_id": notice.user_id,
            "view_count": notice.view_count,
            "created_at": notice.created_at,
            "updated_at": notice.updated_at,
        }

    @staticmethod
    def _to_notice(row, files: List[FileAttachment]) -> Notice:
        return Notice(
            id=row["id"],
            title=row["title"],
            content=row["content"],
            user_id=row["user_id"],
            view_count=row["view_count"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            files=files
        )


class SqlAlchemyFileAttachmentRepository(FileAttachmentRepository):
    """Attachment metadata rows in the notice_files table."""

    def __init__(self, database: SqlAlchemyDatabase):
        self.database = database

    def delete_all(self, attachments: List[FileAttachment]) -> None:
        ids = [a.id for a in attachments if a.id is not None]
        if not ids:
            return
        self.database.connection.execute(
            delete(notice_files_table).where(notice_files_table.c.id.in_(ids))
        )
