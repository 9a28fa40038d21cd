# comment_widget/services/notice_service.py
import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Deque, List, Optional

from comment_widget.utils.datetime_utils import DateTimeUtils

logger = logging.getLogger(__name__)


class NoticeLevel(Enum):
    """사용자에게 보여줄 알림의 수준"""
    SUCCESS = "success"
    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    level: NoticeLevel
    message: str
    error_code: Optional[str] = None
    created_at: datetime = field(default_factory=DateTimeUtils.now)


class NoticeService:
    """
    토스트 등 알림 표시 계층으로 메시지를 전달하는 서비스 클래스.
    - 기본 구현은 로그를 남기고 최근 알림을 메모리에 보관합니다.
    - listener 를 등록하면 실제 UI 알림으로 전달할 수 있습니다.
    """
    def __init__(self, max_history: int = 50):
        self._history: Deque[Notice] = deque(maxlen=max_history)
        self._listeners: List[Callable[[Notice], None]] = []

    def subscribe(self, listener: Callable[[Notice], None]) -> None:
        self._listeners.append(listener)

    def notify(self, level: NoticeLevel, message: str, error_code: Optional[str] = None) -> Notice:
        notice = Notice(level=level, message=message, error_code=error_code)
        self._history.append(notice)

        log = logger.error if level is NoticeLevel.ERROR else logger.info
        log(f"[{level.value}] {message}" + (f" ({error_code})" if error_code else ""))

        for listener in self._listeners:
            try:
                listener(notice)
            except Exception as e:
                # 알림 표시 실패가 원래 작업 결과를 바꾸지 않도록 로그만 남깁니다.
                logger.error(f"알림 전달 중 오류 발생: {e}", exc_info=True)
        return notice

    @property
    def history(self) -> List[Notice]:
        return list(self._history)

    @property
    def last(self) -> Optional[Notice]:
        return self._history[-1] if self._history else None
