"""
Unit tests for the in-memory and SQLAlchemy notice repositories.
"""
import pytest
from datetime import datetime
from noticeboard.domain.notice import FileAttachment, Notice, SearchType
from noticeboard.infrastructure.memory_notice_repository import (
    InMemoryFileAttachmentRepository,
    InMemoryNoticeRepository,
    InMemoryStore,
)
from noticeboard.infrastructure.sqlalchemy_notice_repository import (
    SqlAlchemyDatabase,
    SqlAlchemyFileAttachmentRepository,
    SqlAlchemyNoticeRepository,
)


def make_notice(title, content='본문', user_id='admin01', created_at=None, files=None):
    created_at = created_at or datetime(2025, 9, 15)
    return Notice(
        title=title,
        content=content,
        user_id=user_id,
        created_at=created_at,
        updated_at=created_at,
        files=files or []
    )


@pytest.fixture(params=['memory', 'sqlalchemy'])
def backend(request):
    """Create (notice repository, attachment repository, transactions) per backend."""
    if request.param == 'memory':
        store = InMemoryStore()
        yield InMemoryNoticeRepository(store), InMemoryFileAttachmentRepository(store), store
    else:
        database = SqlAlchemyDatabase("sqlite://")
        database.create_tables()
        yield SqlAlchemyNoticeRepository(database), SqlAlchemyFileAttachmentRepository(database), database
        database.dispose()


class TestNoticeRepository:
    """Test cases shared by every NoticeRepository implementation."""

    def test_save_assigns_id_and_persists_attachments(self, backend):
        # Given
        notices, _, transactions = backend
        notice = make_notice('점검 안내', files=[
            FileAttachment(file_name='a.pdf', file_path='uploads/20250915'),
            FileAttachment(file_name='b.png', file_path='uploads/20250915'),
        ])

        # When
        with transactions.transaction():
            saved = notices.save(notice)
        with transactions.transaction():
            found = notices.find_by_id(saved.id)

        # Then
        assert saved.id is not None
        assert found.title == '점검 안내'
        assert [f.file_name for f in found.files] == ['a.pdf', 'b.png']
        assert all(f.id is not None for f in found.files)
        assert all(f.notice_id == saved.id for f in found.files)

    def test_find_by_id_nonexisting(self, backend):
        notices, _, transactions = backend

        with transactions.transaction():
            assert notices.find_by_id(999) is None

    def test_save_existing_updates_view_count(self, backend):
        # Given
        notices, _, transactions = backend
        with transactions.transaction():
            saved = notices.save(make_notice('공지'))

        # When
        with transactions.transaction():
            found = notices.find_by_id(saved.id)
            found.increment_views()
            notices.save(found)
        with transactions.transaction():
            reloaded = notices.find_by_id(saved.id)

        # Then
        assert reloaded.view_count == 1

    def test_found_notice_is_detached_from_storage(self, backend):
        notices, _, transactions = backend
        with transactions.transaction():
            saved = notices.save(make_notice('공지'))

        with transactions.transaction():
            notices.find_by_id(saved.id).increment_views()
        with transactions.transaction():
            assert notices.find_by_id(saved.id).view_count == 0

    def test_delete_removes_notice_and_attachments(self, backend):
        # Given
        notices, _, transactions = backend
        with transactions.transaction():
            saved = notices.save(make_notice('공지', files=[
                FileAttachment(file_name='a.pdf', file_path='uploads/20250915'),
            ]))

        # When
        with transactions.transaction():
            notices.delete(notices.find_by_id(saved.id))

        # Then
        with transactions.transaction():
            assert notices.find_by_id(saved.id) is None

    def test_update_notice_adds_new_attachments(self, backend):
        # Given
        notices, attachments, transactions = backend
        with transactions.transaction():
            saved = notices.save(make_notice('공지', files=[
                FileAttachment(file_name='old.pdf', file_path='uploads/20250915'),
            ]))

        # When
        with transactions.transaction():
            notice = notices.find_by_id(saved.id)
            attachments.delete_all(notice.files)
            notice.files = [FileAttachment(file_name='new.pdf', file_path='uploads/20250916')]
            notice.update_details('수정된 공지', '수정된 본문')
            notices.update_notice(notice)
        with transactions.transaction():
            reloaded = notices.find_by_id(saved.id)

        # Then
        assert reloaded.title == '수정된 공지'
        assert reloaded.content == '수정된 본문'
        assert [f.file_name for f in reloaded.files] == ['new.pdf']

    def test_update_nonexisting_notice_raises_error(self, backend):
        notices, _, transactions = backend
        ghost = make_notice('없는 공지')
        ghost.id = 404

        with pytest.raises(LookupError):
            with transactions.transaction():
                notices.update_notice(ghost)

    def test_delete_all_with_empty_list(self, backend):
        _, attachments, transactions = backend

        with transactions.transaction():
            attachments.delete_all([])

    def test_transaction_rolls_back_on_error(self, backend):
        # Given
        notices, _, transactions = backend

        # When
        with pytest.raises(RuntimeError):
            with transactions.transaction():
                notices.save(make_notice('롤백될 공지'))
                raise RuntimeError("boom")

        # Then
        with transactions.transaction():
            page = notices.get_notice_search(SearchType.TITLE, None)
        assert page.total == 0


class TestNoticeSearch:
    """Test cases for keyword search with pagination."""

    @pytest.fixture
    def seeded(self, backend):
        notices, attachments, transactions = backend
        with transactions.transaction():
            notices.save(make_notice('서버 점검 안내', '새벽 2시 점검', 'admin01', datetime(2025, 9, 1)))
            notices.save(make_notice('추석 연휴 휴무', '고객센터 휴무', 'admin02', datetime(2025, 9, 2)))
            notices.save(make_notice('긴급 점검 공지', '네트워크 장애', 'admin01', datetime(2025, 9, 3)))
        return notices, transactions

    def test_search_by_title(self, seeded):
        notices, transactions = seeded

        with transactions.transaction():
            page = notices.get_notice_search(SearchType.TITLE, '점검')

        assert page.total == 2
        assert [n.title for n in page.items] == ['긴급 점검 공지', '서버 점검 안내']

    def test_search_by_content(self, seeded):
        notices, transactions = seeded

        with transactions.transaction():
            page = notices.get_notice_search(SearchType.CONTENT, '휴무')

        assert page.total == 1
        assert page.items[0].title == '추석 연휴 휴무'

    def test_search_by_title_and_content(self, seeded):
        notices, transactions = seeded

        with transactions.transaction():
            page = notices.get_notice_search(SearchType.TITLE_CONTENT, '점검')

        assert page.total == 2

    def test_search_by_user_id(self, seeded):
        notices, transactions = seeded

        with transactions.transaction():
            page = notices.get_notice_search(SearchType.USER_ID, 'admin02')

        assert page.total == 1
        assert page.items[0].user_id == 'admin02'

    def test_search_without_keyword_returns_all_newest_first(self, seeded):
        notices, transactions = seeded

        with transactions.transaction():
            page = notices.get_notice_search(SearchType.TITLE, None)

        assert page.total == 3
        assert page.items[0].title == '긴급 점검 공지'

    def test_search_pagination(self, seeded):
        notices, transactions = seeded

        with transactions.transaction():
            first = notices.get_notice_search(SearchType.TITLE, None, page=1, per_page=2)
            second = notices.get_notice_search(SearchType.TITLE, None, page=2, per_page=2)

        assert len(first.items) == 2
        assert len(second.items) == 1
        assert first.total == second.total == 3
        assert first.total_pages == 2
        assert second.items[0].title == '서버 점검 안내'

    def test_search_no_match_returns_empty_page(self, seeded):
        notices, transactions = seeded

        with transactions.transaction():
            page = notices.get_notice_search(SearchType.TITLE, '존재하지않는키워드')

        assert page.items == []
        assert page.total == 0

    def test_search_escapes_like_wildcards(self, seeded):
        notices, transactions = seeded

        with transactions.transaction():
            page = notices.get_notice_search(SearchType.TITLE, '%')

        assert page.total == 0
