from enum import StrEnum

import attrs


class NoticeLevel(StrEnum):
    INFO = 'info'
    SUCCESS = 'success'
    WARNING = 'warning'
    ERROR = 'error'


@attrs.define(frozen=True)
class Notice:
    level: NoticeLevel
    title: str
    description: str = ''

    @classmethod
    def info(cls, title: str, description: str = '') -> 'Notice':
        return cls(level=NoticeLevel.INFO, title=title, description=description)

    @classmethod
    def success(cls, title: str, description: str = '') -> 'Notice':
        return cls(level=NoticeLevel.SUCCESS, title=title, description=description)

    @classmethod
    def warning(cls, title: str, description: str = '') -> 'Notice':
        return cls(level=NoticeLevel.WARNING, title=title, description=description)

    @classmethod
    def error(cls, title: str, description: str = '') -> 'Notice':
        return cls(level=NoticeLevel.ERROR, title=title, description=description)
