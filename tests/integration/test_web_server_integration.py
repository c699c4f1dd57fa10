"""
Integration tests for the notice board REST API.
"""
import io
import os
import pytest

from noticeboard.config import Settings
from noticeboard.domain.errors import InvalidArgumentError
from noticeboard.infrastructure.sqlalchemy_notice_repository import SqlAlchemyNoticeRepository
from noticeboard.interface_adapters.web_server import create_app, int_arg, search_notices


@pytest.fixture
def settings(tmp_path):
    return Settings(
        REPOSITORY_BACKEND='sqlalchemy',
        DATABASE_URL=f"sqlite:///{tmp_path / 'noticeboard.db'}",
        UPLOAD_DIR=str(tmp_path / 'uploads'),
        ALLOWED_EXTENSIONS=['pdf', 'png', 'txt'],
        DEFAULT_PAGE_SIZE=2,
        MAX_PAGE_SIZE=5
    )


@pytest.fixture
def client(settings):
    app = create_app(settings)
    app.config['TESTING'] = True
    return app.test_client()


def post_notice(client, title='서버 점검 안내', user_id='admin01', files=None, content='새벽 2시 점검'):
    data = {'title': title, 'content': content, 'userId': user_id}
    if files:
        data['files'] = [(io.BytesIO(body), name) for name, body in files]
    return client.post('/api/notices', data=data, content_type='multipart/form-data')


def stored_paths(detail):
    return [f"{f['filePath']}/{f['fileName']}" for f in detail['files']]


class TestNoticeApi:

    def test_health(self, client):
        response = client.get('/api/health')

        assert response.status_code == 200
        assert response.get_json() == {'status': 'ok'}

    def test_create_and_view_notice_with_files(self, client):
        # When
        response = post_notice(client, files=[('guide.pdf', b'%PDF'), ('map.png', b'PNG')])

        # Then
        assert response.status_code == 201
        notice_id = response.get_json()['data']['noticeId']

        detail = client.get(f'/api/notices/{notice_id}').get_json()['data']
        assert detail['title'] == '서버 점검 안내'
        assert detail['userId'] == 'admin01'
        assert detail['viewCount'] == 1
        assert len(detail['files']) == 2
        assert all(os.path.exists(p) for p in stored_paths(detail))

    def test_view_count_increases_on_each_view(self, client):
        notice_id = post_notice(client).get_json()['data']['noticeId']

        for _ in range(3):
            detail = client.get(f'/api/notices/{notice_id}').get_json()['data']

        assert detail['viewCount'] == 3

    def test_create_without_title_is_bad_request(self, client):
        response = post_notice(client, title='')

        assert response.status_code == 400
        assert response.get_json()['code'] == 'INVALID_ARGUMENT'

    def test_create_with_disallowed_file_is_file_error(self, client):
        response = post_notice(client, files=[('virus.exe', b'MZ')])

        assert response.status_code == 500
        assert response.get_json()['code'] == 'FILER_ERROR'

    def test_detail_not_found(self, client):
        response = client.get('/api/notices/999')

        assert response.status_code == 404
        body = response.get_json()
        assert body['success'] is False
        assert body['code'] == 'NOTICE_NOT_FOUND'

    def test_update_replaces_files(self, client):
        # Given
        notice_id = post_notice(client, files=[('old.pdf', b'old')]).get_json()['data']['noticeId']
        old_paths = stored_paths(client.get(f'/api/notices/{notice_id}').get_json()['data'])

        # When
        response = client.put(
            f'/api/notices/{notice_id}',
            data={
                'title': '수정된 공지',
                'content': '수정된 본문',
                'userId': 'admin01',
                'files': [(io.BytesIO(b'new'), 'new.txt')]
            },
            content_type='multipart/form-data'
        )

        # Then
        assert response.status_code == 200
        assert response.get_json()['data']['title'] == '수정된 공지'

        detail = client.get(f'/api/notices/{notice_id}').get_json()['data']
        assert [f['fileName'].split('_', 1)[1] for f in detail['files']] == ['new.txt']
        assert not any(os.path.exists(p) for p in old_paths)

    def test_update_by_other_user_is_rejected(self, client):
        notice_id = post_notice(client).get_json()['data']['noticeId']

        response = client.put(
            f'/api/notices/{notice_id}',
            data={'title': '탈취', 'content': '', 'userId': 'guest'},
            content_type='multipart/form-data'
        )

        assert response.status_code == 400
        assert response.get_json()['code'] == 'USER_ID_MISMATCH'

    def test_update_nonexisting_is_server_error_with_invalid_argument_code(self, client):
        response = client.put(
            '/api/notices/999',
            data={'title': '제목', 'content': '', 'userId': 'admin01'},
            content_type='multipart/form-data'
        )

        assert response.status_code == 500
        assert response.get_json()['code'] == 'INVALID_ARGUMENT'

    def test_update_repository_failure_is_server_error(self, client, monkeypatch):
        # Given
        notice_id = post_notice(client).get_json()['data']['noticeId']

        def fail_update(self, notice):
            raise RuntimeError('db down')

        monkeypatch.setattr(SqlAlchemyNoticeRepository, 'update_notice', fail_update)

        # When
        response = client.put(
            f'/api/notices/{notice_id}',
            data={'title': '수정된 공지', 'content': '', 'userId': 'admin01'},
            content_type='multipart/form-data'
        )

        # Then
        assert response.status_code == 500
        assert response.get_json()['code'] == 'INVALID_ARGUMENT'
        assert client.get(f'/api/notices/{notice_id}').get_json()['data']['title'] == '서버 점검 안내'

    def test_delete_notice_removes_files(self, client):
        # Given
        notice_id = post_notice(client, files=[('guide.pdf', b'%PDF')]).get_json()['data']['noticeId']
        paths = stored_paths(client.get(f'/api/notices/{notice_id}').get_json()['data'])

        # When
        response = client.delete(f'/api/notices/{notice_id}?userId=admin01')

        # Then
        assert response.status_code == 200
        assert response.get_json()['success'] is True
        assert client.get(f'/api/notices/{notice_id}').status_code == 404
        assert not any(os.path.exists(p) for p in paths)

    def test_delete_by_other_user_is_rejected(self, client):
        notice_id = post_notice(client).get_json()['data']['noticeId']

        response = client.delete(f'/api/notices/{notice_id}?userId=guest')

        assert response.status_code == 400
        assert response.get_json()['code'] == 'USER_ID_MISMATCH'
        assert client.get(f'/api/notices/{notice_id}').status_code == 200

    def test_delete_without_user_id_is_bad_request(self, client):
        response = client.delete('/api/notices/1')

        assert response.status_code == 400

    def test_search_with_paging(self, client):
        # Given
        post_notice(client, title='서버 점검 안내')
        post_notice(client, title='긴급 점검 공지')
        post_notice(client, title='추석 연휴 휴무')

        # When
        response = client.get('/api/notices?searchType=title&keyword=점검&page=1')

        # Then
        data = response.get_json()['data']
        assert response.status_code == 200
        assert data['totalElements'] == 2
        assert data['size'] == 2
        assert [n['title'] for n in data['content']] == ['긴급 점검 공지', '서버 점검 안내']

    def test_search_no_match_returns_empty_page(self, client):
        post_notice(client)

        data = client.get('/api/notices?keyword=없는키워드').get_json()['data']

        assert data['content'] == []
        assert data['totalElements'] == 0
        assert data['totalPages'] == 0

    def test_search_size_is_capped(self, client):
        data = client.get('/api/notices?size=50').get_json()['data']

        assert data['size'] == 5

    def test_search_with_unknown_type_is_bad_request(self, client):
        response = client.get('/api/notices?searchType=author&keyword=x')

        assert response.status_code == 400
        assert response.get_json()['code'] == 'INVALID_ARGUMENT'

    def test_search_with_bad_page_is_bad_request(self, client):
        assert client.get('/api/notices?page=abc').status_code == 400
        assert client.get('/api/notices?page=0').status_code == 400

    def test_search_with_huge_page_is_bad_request(self, client):
        response = client.get('/api/notices?page=99999999999999999999')

        assert response.status_code == 400
        assert response.get_json()['code'] == 'INVALID_ARGUMENT'

    def test_unknown_route_returns_json_error(self, client):
        response = client.get('/api/unknown')

        assert response.status_code == 404
        assert response.get_json()['success'] is False


class TestRequestParsing:

    @pytest.fixture
    def app(self, settings):
        return create_app(settings)

    def test_non_integer_arg_keeps_original_error(self, app):
        with app.test_request_context('/api/notices?page=abc'):
            with pytest.raises(InvalidArgumentError) as exc_info:
                int_arg('page', 1)

        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_unknown_search_type_keeps_original_error(self, app):
        with app.test_request_context('/api/notices?searchType=author'):
            with pytest.raises(InvalidArgumentError) as exc_info:
                search_notices()

        assert isinstance(exc_info.value.__cause__, ValueError)
