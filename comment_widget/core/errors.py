# comment_widget/core/errors.py
"""
위젯 전반에서 사용하는 예외 계층.

모든 예외는 WidgetError 를 상속하며, 작업 경계(CommentWidget)에서 잡혀
사용자 알림으로 전환됩니다. error_code 는 로그와 알림에서 오류 종류를 구분하는 데 쓰입니다.
"""
from typing import Any, Dict, Optional


class WidgetError(Exception):
    """위젯 예외의 공통 부모 클래스"""
    error_code = "WIDGET_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(WidgetError):
    """빈 내용, 길이 초과, 알 수 없는 반응 종류 등 입력값 오류"""
    error_code = "VALIDATION_ERROR"


class AuthRequiredError(WidgetError):
    """로그인하지 않은 상태에서 쓰기를 시도한 경우"""
    error_code = "AUTH_REQUIRED"


class RemoteUnavailableError(WidgetError):
    """원격 저장소(Firestore/Storage) 호출 실패 또는 시간 초과"""
    error_code = "REMOTE_UNAVAILABLE"


class InvalidDocumentError(WidgetError):
    """원격 문서의 형식이 잘못되어 모델로 변환할 수 없는 경우"""
    error_code = "INVALID_DOCUMENT"


class PartialWriteError(WidgetError):
    """
    첨부파일 업로드는 성공했지만 레코드 쓰기가 실패한 경우.
    업로드된 파일은 롤백하지 않으며 file_url 로 남겨 둡니다.
    """
    error_code = "PARTIAL_WRITE"

    def __init__(self, message: str, file_url: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.file_url = file_url
