"""
Flask web server exposing the notice board REST API.
"""
from typing import Optional

from flask import Blueprint, Flask, current_app, jsonify, request
from flask_cors import CORS

from ..application.notice_service import NoticeService
from ..config import Settings, get_settings
from ..domain.errors import InvalidArgumentError
from ..domain.notice import NoticeCreateRequest, NoticeUpdateRequest, SearchType
from ..infrastructure.local_file_store import LocalFileStore
from ..infrastructure.repository_factory import RepositoryFactory
from ..logging_config import get_logger, setup_logging
from .error_mapper import register_error_handlers

logger = get_logger(__name__)

notice_api = Blueprint('notice_api', __name__, url_prefix='/api')


def build_notice_service(settings: Settings) -> NoticeService:
    """설정에 맞는 저장소와 파일 저장소로 서비스 구성."""
    repositories = RepositoryFactory.create_repositories(settings)
    file_store = LocalFileStore(
        upload_root=settings.UPLOAD_DIR,
        max_size_bytes=settings.max_upload_size_bytes,
        allowed_extensions=settings.ALLOWED_EXTENSIONS
    )
    return NoticeService(
        notice_repository=repositories.notices,
        file_attachment_repository=repositories.attachments,
        file_store=file_store,
        transactions=repositories.transactions,
        logger=get_logger('noticeboard.service')
    )


def create_app(settings: Optional[Settings] = None, service: Optional[NoticeService] = None) -> Flask:
    """Create the Flask application.

    Args:
        settings: Application settings, environment defaults when None
        service: Prebuilt notice service, built from settings when None

    Returns:
        Configured Flask app
    """
    settings = settings or get_settings()

    app = Flask(__name__)
    app.extensions['settings'] = settings
    app.extensions['notice_service'] = service or build_notice_service(settings)

    CORS(app, origins=settings.CORS_ORIGINS)
    app.register_blueprint(notice_api)
    register_error_handlers(app)
    return app


def get_notice_service() -> NoticeService:
    return current_app.extensions['notice_service']


def get_app_settings() -> Settings:
    return current_app.extensions['settings']


def required_field(name: str) -> str:
    value = request.form.get(name, '').strip()
    if not value:
        raise InvalidArgumentError(f"{name} 값이 필요합니다.")
    return value


def int_arg(name: str, default: int) -> int:
    raw = request.args.get(name)
    if raw is None or raw == '':
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise InvalidArgumentError(f"{name} 값은 정수여야 합니다: {raw}") from e


def uploaded_files():
    return [f for f in request.files.getlist('files') if f and f.filename]


@notice_api.route('/health')
def health():
    return jsonify({'status': 'ok'})


@notice_api.route('/notices', methods=['POST'])
def create_notice():
    """공지사항 등록 API."""
    notice_request = NoticeCreateRequest(
        title=required_field('title'),
        content=request.form.get('content', ''),
        user_id=required_field('userId')
    )
    result = get_notice_service().create_notice(notice_request, uploaded_files())
    return jsonify({'success': True, 'data': result.to_dict()}), 201


@notice_api.route('/notices/<int:notice_id>', methods=['PUT'])
def update_notice(notice_id: int):
    """공지사항 수정 API. 첨부파일은 새로 올린 파일로 전부 교체된다."""
    notice_request = NoticeUpdateRequest(
        notice_id=notice_id,
        title=required_field('title'),
        content=request.form.get('content', ''),
        user_id=required_field('userId')
    )
    result = get_notice_service().update_notice(notice_request, uploaded_files())
    return jsonify({'success': True, 'data': result.to_dict()})


@notice_api.route('/notices/<int:notice_id>', methods=['DELETE'])
def delete_notice(notice_id: int):
    """공지사항 삭제 API."""
    user_id = request.args.get('userId', '').strip()
    if not user_id:
        raise InvalidArgumentError("userId 값이 필요합니다.")

    get_notice_service().delete_notice(notice_id, user_id)
    return jsonify({'success': True, 'message': '공지사항이 삭제되었습니다.'})


@notice_api.route('/notices/<int:notice_id>', methods=['GET'])
def get_notice_detail(notice_id: int):
    """공지사항 상세 조회 API (조회수 증가)."""
    detail = get_notice_service().get_notice_detail(notice_id)
    return jsonify({'success': True, 'data': detail.to_dict()})


@notice_api.route('/notices', methods=['GET'])
def search_notices():
    """공지사항 검색 API."""
    settings = get_app_settings()

    try:
        search_type = SearchType.parse(request.args.get('searchType'))
    except ValueError as e:
        raise InvalidArgumentError(str(e)) from e

    keyword = request.args.get('keyword', '').strip() or None
    page = int_arg('page', 1)
    size = min(int_arg('size', settings.DEFAULT_PAGE_SIZE), settings.MAX_PAGE_SIZE)

    result = get_notice_service().search_notices(search_type, keyword, page, size)
    return jsonify({
        'success': True,
        'data': {
            'content': [summary.to_dict() for summary in result.items],
            'page': result.page,
            'size': result.size,
            'totalElements': result.total,
            'totalPages': result.total_pages,
            'hasNext': result.has_next,
            'hasPrevious': result.has_previous
        }
    })


def run_server(host: Optional[str] = None, port: Optional[int] = None, debug: Optional[bool] = None):
    """게시판 웹 서버 실행."""
    settings = get_settings()
    setup_logging(settings)

    host = host or settings.HOST
    port = port or settings.PORT
    debug = settings.DEBUG if debug is None else debug

    app = create_app(settings)
    logger.info(f"{settings.APP_NAME} 서버 시작: http://{host}:{port}")
    app.run(host=host, port=port, debug=debug)
