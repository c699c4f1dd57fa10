"""
Maps notice board errors to HTTP error responses.
"""
from typing import Any, Dict, Tuple, Type

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from ..domain.errors import (
    FileSaveError,
    InvalidArgumentError,
    NoticeBoardError,
    NoticeCreateError,
    NoticeDeleteError,
    NoticeDetailError,
    NoticeNotFoundError,
    NoticeSearchError,
    NoticeUpdateError,
    UserIdMismatchError,
)
from ..logging_config import get_logger

logger = get_logger(__name__)

INTERNAL_ERROR = ("INTERNAL_ERROR", 500)

ERROR_TABLE: Dict[Type[NoticeBoardError], Tuple[str, int]] = {
    NoticeNotFoundError: ("NOTICE_NOT_FOUND", 404),
    UserIdMismatchError: ("USER_ID_MISMATCH", 400),
    FileSaveError: ("FILER_ERROR", 500),
    NoticeCreateError: ("NOTICE_CREATE_ERROR", 500),
    NoticeDeleteError: ("NOTICE_DELETE_ERROR", 500),
    NoticeDetailError: ("NOTICE_DETAIL_ERROR", 500),
    NoticeSearchError: ("NOTICE_SEARCH_ERROR", 500),
    InvalidArgumentError: ("INVALID_ARGUMENT", 400),
    # 수정 실패는 원인과 무관하게 INVALID_ARGUMENT 코드, 서버 오류 상태로 응답
    NoticeUpdateError: ("INVALID_ARGUMENT", 500),
}


def lookup(error: NoticeBoardError) -> Tuple[str, int]:
    """Find (code, status) for an error, falling back along its class hierarchy."""
    for error_type in type(error).__mro__:
        if error_type in ERROR_TABLE:
            return ERROR_TABLE[error_type]
    return INTERNAL_ERROR


def error_body(message: str, code: str) -> Dict[str, Any]:
    return {
        'success': False,
        'message': message,
        'code': code
    }


def to_response(error: NoticeBoardError) -> Tuple[Dict[str, Any], int]:
    code, status = lookup(error)
    return error_body(error.message, code), status


def register_error_handlers(app: Flask) -> None:
    """Register error handlers on a Flask app."""

    @app.errorhandler(NoticeBoardError)
    def handle_notice_board_error(error: NoticeBoardError):
        body, status = to_response(error)
        return jsonify(body), status

    @app.errorhandler(HTTPException)
    def handle_http_exception(error: HTTPException):
        code = (error.name or 'HTTP_ERROR').upper().replace(' ', '_')
        return jsonify(error_body(error.description, code)), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        logger.exception("처리되지 않은 오류가 발생했습니다.")
        code, status = INTERNAL_ERROR
        return jsonify(error_body("서버 내부 오류가 발생했습니다.", code)), status
