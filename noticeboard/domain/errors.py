"""
Notice board error taxonomy.
"""


class NoticeBoardError(Exception):
    """Base class for notice board failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NoticeNotFoundError(NoticeBoardError):
    """No notice matches the requested ID."""


class UserIdMismatchError(NoticeBoardError):
    """Caller is not the author of the notice."""


class FileSaveError(NoticeBoardError):
    """File store failed while saving uploads."""


class NoticeCreateError(NoticeBoardError):
    pass


class NoticeDeleteError(NoticeBoardError):
    pass


class NoticeDetailError(NoticeBoardError):
    pass


class NoticeSearchError(NoticeBoardError):
    pass


class InvalidArgumentError(NoticeBoardError, ValueError):
    """Malformed request input."""


class NoticeUpdateError(InvalidArgumentError):
    """Any update failure other than an ownership mismatch."""
