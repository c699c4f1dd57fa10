"""
Command Line Interface for the notice board backend.
"""
import argparse
import json
import sys
from typing import Optional

from ..config import Settings, get_settings
from ..domain.errors import NoticeBoardError
from ..domain.notice import SearchType
from ..infrastructure.sqlalchemy_notice_repository import SqlAlchemyDatabase
from ..logging_config import setup_logging


class NoticeBoardCLI:
    """Command Line Interface for Notice Board."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def init_db(self) -> None:
        """데이터베이스 테이블 생성."""
        database = SqlAlchemyDatabase(self.settings.DATABASE_URL, echo=self.settings.DATABASE_ECHO)
        try:
            database.create_tables()
        finally:
            database.dispose()
        print(f"✅ Database ready: {self.settings.DATABASE_URL}")

    def search(self, search_type: str, keyword: Optional[str], page: int, size: int) -> None:
        """Search notices and print the page as JSON.

        Args:
            search_type: title, content, titleContent or userId
            keyword: Search keyword, all notices when empty
            page: Page number (1-based)
            size: Number of notices per page
        """
        from .web_server import build_notice_service

        service = build_notice_service(self.settings)
        result = service.search_notices(SearchType.parse(search_type), keyword, page, size)

        output = {
            'page': result.page,
            'size': result.size,
            'totalElements': result.total,
            'totalPages': result.total_pages,
            'content': [summary.to_dict() for summary in result.items]
        }
        print(json.dumps(output, ensure_ascii=False, indent=2))

    def serve_web(self, host: Optional[str] = None, port: Optional[int] = None, debug: bool = False) -> None:
        """웹 서버 실행."""
        from .web_server import run_server
        run_server(host=host, port=port, debug=debug or None)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Notice Board backend',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create tables
  python main.py init-db

  # Start web server
  python main.py serve --port 8080

  # Search notices by title
  python main.py search --type title --keyword 점검
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    subparsers.add_parser('init-db', help='Create database tables')

    serve_parser = subparsers.add_parser('serve', help='Start web server')
    serve_parser.add_argument('--host', help='Server host')
    serve_parser.add_argument('--port', type=int, help='Server port')
    serve_parser.add_argument('--debug', action='store_true', help='Debug mode')

    search_parser = subparsers.add_parser('search', help='Search notices')
    search_parser.add_argument('--type', default=SearchType.TITLE_CONTENT.value,
                               choices=[t.value for t in SearchType], help='Search target')
    search_parser.add_argument('--keyword', help='Search keyword')
    search_parser.add_argument('--page', type=int, default=1, help='Page number (1-based)')
    search_parser.add_argument('--size', type=int, default=10, help='Notices per page')

    return parser


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    cli = NoticeBoardCLI()
    setup_logging(cli.settings)

    try:
        if args.command == 'init-db':
            cli.init_db()
        elif args.command == 'serve':
            cli.serve_web(host=args.host, port=args.port, debug=args.debug)
        elif args.command == 'search':
            cli.search(args.type, args.keyword, args.page, args.size)
    except KeyboardInterrupt:
        print("\n⏹️ Stopped by user")
        sys.exit(0)
    except NoticeBoardError as e:
        print(f"❌ {e.message}")
        sys.exit(1)


if __name__ == '__main__':
    main()
