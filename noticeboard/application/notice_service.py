"""
Notice service implementing notice and attachment lifecycle.
"""
import logging
from typing import Any, List, Optional, Sequence

from ..domain.errors import (
    FileSaveError,
    InvalidArgumentError,
    NoticeCreateError,
    NoticeDeleteError,
    NoticeDetailError,
    NoticeNotFoundError,
    NoticeSearchError,
    NoticeUpdateError,
    UserIdMismatchError,
)
from ..domain.file_store import FileStore
from ..domain.notice import Notice, NoticeCreateRequest, NoticeUpdateRequest, Page, SearchType
from ..domain.notice_repository import FileAttachmentRepository, NoticeRepository, TransactionManager
from ..logging_config import get_logger
from .notice_responses import NoticeCreateResult, NoticeDetail, NoticeSummary, NoticeUpdateResult

# LIMIT/OFFSET must fit a signed 64-bit SQL integer
MAX_ROW_OFFSET = 2 ** 63 - 1


class NoticeService:
    """Service orchestrating notices and their attached files."""

    def __init__(
        self,
        notice_repository: NoticeRepository,
        file_attachment_repository: FileAttachmentRepository,
        file_store: FileStore,
        transactions: TransactionManager,
        logger: Optional[logging.Logger] = None
    ):
        """Initialize the service.

        Args:
            notice_repository: Notice repository implementation
            file_attachment_repository: Attachment metadata repository
            file_store: Storage for uploaded file blobs
            transactions: Transaction boundary shared by both repositories
            logger: Logger to report to, module logger by default
        """
        self.notice_repository = notice_repository
        self.file_attachment_repository = file_attachment_repository
        self.file_store = file_store
        self.transactions = transactions
        self.logger = logger or get_logger(__name__)

    def create_notice(
        self,
        request: NoticeCreateRequest,
        files: Optional[Sequence[Any]] = None
    ) -> NoticeCreateResult:
        """Create a notice, storing any uploaded files first.

        Stored files are not removed when the notice save fails afterwards.

        Raises:
            FileSaveError: The file store failed
            NoticeCreateError: The notice could not be persisted
        """
        notice = Notice.from_request(request)

        if files:
            self._add_new_files(files, notice)

        try:
            with self.transactions.transaction():
                saved_notice = self.notice_repository.save(notice)
            self.logger.info(
                f"공지사항 등록 성공. ID: {saved_notice.id}", extra={'notice_id': saved_notice.id}
            )
        except Exception as e:
            self.logger.error("공지사항 등록 중 문제가 발생하였습니다.", exc_info=True)
            raise NoticeCreateError("공지사항 등록 중 문제가 발생하였습니다.") from e

        return NoticeCreateResult.from_notice(saved_notice)

    def delete_notice(self, notice_id: int, user_id: str) -> None:
        """Delete a notice together with its attachment rows and stored files.

        Raises:
            NoticeNotFoundError: No notice with this ID
            UserIdMismatchError: Caller is not the author
            NoticeDeleteError: Any other failure
        """
        try:
            with self.transactions.transaction():
                notice = self._get_notice_by_id(notice_id)
                self._check_user_id(notice, user_id)

                if notice.files:
                    self._delete_existing_files(notice)

                self.notice_repository.delete(notice)
            self.logger.info(f"공지사항 삭제 성공. ID: {notice_id}", extra={'notice_id': notice_id})
        except UserIdMismatchError:
            self.logger.error("작성자만 삭제할 수 있습니다.", exc_info=True)
            raise
        except NoticeNotFoundError:
            raise
        except Exception as e:
            self.logger.error("공지사항 삭제 중 문제가 발생했습니다.", exc_info=True)
            raise NoticeDeleteError("공지사항 삭제 중 문제가 발생했습니다.") from e

    def get_notice_detail(self, notice_id: int) -> NoticeDetail:
        """Get notice detail, incrementing its view count by one.

        Raises:
            NoticeNotFoundError: No notice with this ID
            NoticeDetailError: Any other failure
        """
        try:
            with self.transactions.transaction():
                notice = self._get_notice_by_id(notice_id)
                notice.increment_views()
                self.notice_repository.save(notice)
            return NoticeDetail.from_notice(notice)
        except NoticeNotFoundError:
            raise
        except Exception as e:
            self.logger.error("공지사항 조회 중 문제가 발생했습니다.", exc_info=True)
            raise NoticeDetailError("공지사항 조회 중 문제가 발생했습니다.") from e

    def search_notices(
        self,
        search_type: SearchType,
        keyword: Optional[str],
        page: int = 1,
        per_page: int = 10
    ) -> Page[NoticeSummary]:
        """Search notices by keyword.

        Args:
            search_type: Field(s) to match the keyword against
            keyword: Search keyword, empty matches all notices
            page: Page number (1-based)
            per_page: Number of notices per page

        Returns:
            Page of notice summaries; an empty page when nothing matches

        Raises:
            InvalidArgumentError: Page or page size below 1, or beyond the row offset limit
            NoticeSearchError: Any repository failure
        """
        if page < 1 or per_page < 1:
            raise InvalidArgumentError("page와 size는 1 이상이어야 합니다.")
        if page * per_page > MAX_ROW_OFFSET:
            raise InvalidArgumentError("page 또는 size 값이 너무 큽니다.")

        try:
            with self.transactions.transaction():
                notice_page = self.notice_repository.get_notice_search(
                    search_type, keyword, page, per_page
                )
            return notice_page.map(NoticeSummary.from_notice)
        except Exception as e:
            self.logger.error("공지사항 조건 검색 중 문제가 발생했습니다.", exc_info=True)
            raise NoticeSearchError("공지사항 조건 검색 중 문제가 발생했습니다.") from e

    def update_notice(
        self,
        request: NoticeUpdateRequest,
        files: Optional[Sequence[Any]] = None
    ) -> NoticeUpdateResult:
        """Update a notice, replacing all of its attachments.

        Existing attachments are always removed, then the uploaded files
        become the new attachment set.

        Raises:
            UserIdMismatchError: Caller is not the author
            NoticeUpdateError: Any other failure, including a missing notice
        """
        try:
            with self.transactions.transaction():
                notice = self._get_notice_by_id(request.notice_id)
                self._check_user_id(notice, request.user_id)
                self._delete_existing_files(notice)
                notice.update_details(request.title, request.content)
                if files:
                    self._add_new_files(files, notice)
                self.notice_repository.update_notice(notice)
            self.logger.info(f"공지사항 수정 성공. ID: {notice.id}", extra={'notice_id': notice.id})
            return NoticeUpdateResult.from_notice(notice)
        except UserIdMismatchError:
            self.logger.error("작성자만 수정할 수 있습니다.", exc_info=True)
            raise
        except Exception as e:
            self.logger.error("파일 처리 중 문제가 발생하였습니다.", exc_info=True)
            raise NoticeUpdateError("파일 처리 중 문제가 발생하였습니다.") from e

    def _get_notice_by_id(self, notice_id: int) -> Notice:
        notice = self.notice_repository.find_by_id(notice_id)
        if notice is None:
            raise NoticeNotFoundError("공지사항을 찾을 수 없습니다.")
        return notice

    def _check_user_id(self, notice: Notice, user_id: Optional[str]) -> None:
        if not notice.is_owned_by(user_id):
            raise UserIdMismatchError("작성자만 수정할 수 있습니다.")

    def _delete_existing_files(self, notice: Notice) -> None:
        existing_files = list(notice.files)
        self.file_attachment_repository.delete_all(existing_files)
        self.logger.info(f"기존 파일 내역 DB 삭제 성공. 삭제된 파일 수: {len(existing_files)}")

        existing_file_paths: List[str] = [f.full_path() for f in existing_files]
        self.file_store.delete_files(existing_file_paths)
        self.logger.info("기존 파일 삭제 성공")

        notice.files = []

    def _add_new_files(self, files: Sequence[Any], notice: Notice) -> None:
        try:
            stored_files = self.file_store.save_files(files)
            notice.add_files(stored_files)
        except Exception as e:
            self.logger.error("새 파일을 추가하는 중 문제가 발생했습니다.", exc_info=True)
            raise FileSaveError("새 파일을 추가하는 중 문제가 발생했습니다.") from e
