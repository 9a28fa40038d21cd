# comment_widget/core/config.py

import os # 'os' 모듈: 환경 변수를 읽기 위해 사용합니다.


def _int_env(key: str, default: int) -> int:
    value = os.getenv(key)
    return int(value) if value else default


def _float_env(key: str, default: float) -> float:
    value = os.getenv(key)
    return float(value) if value else default


class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    DEBUG = False
    TESTING = False

    # 첨부파일이 업로드될 Firebase Storage 버킷 이름입니다.
    FIREBASE_STORAGE_BUCKET = os.getenv('FIREBASE_STORAGE_BUCKET')
    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')

    # Firestore 컬렉션 이름. 기존 웹 위젯과 같은 컬렉션을 공유합니다.
    COMMENTS_COLLECTION = os.getenv('COMMENTS_COLLECTION', 'comments')
    REPLIES_COLLECTION = os.getenv('REPLIES_COLLECTION', 'Reply')
    USERS_COLLECTION = os.getenv('USERS_COLLECTION', 'Users')

    # 한 번에 가져오는 댓글 페이지 크기
    PAGE_SIZE = _int_env('PAGE_SIZE', 10)
    # 댓글/답글 본문의 최대 길이
    MAX_CONTENT_LENGTH = _int_env('MAX_CONTENT_LENGTH', 250)

    # 원격 호출 하나에 허용되는 최대 시간(초). 초과 시 RemoteUnavailableError 로 처리됩니다.
    REMOTE_TIMEOUT_SECONDS = _float_env('REMOTE_TIMEOUT_SECONDS', 10.0)
    # 멱등한 읽기 요청에 한해 재시도하는 횟수. 쓰기는 재시도하지 않습니다.
    READ_RETRIES = _int_env('READ_RETRIES', 2)

    UPLOAD_FOLDER = os.getenv('UPLOAD_FOLDER', 'uploads')


class DevelopmentConfig(Config):
    """개발 환경을 위한 설정 클래스입니다."""
    DEBUG = True
    # 개발용 Firebase 프로젝트의 서비스 계정 키 파일 경로
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH', Config.FIREBASE_CREDENTIALS_PATH)


class TestingConfig(Config):
    """테스트 환경을 위한 설정 클래스입니다."""
    TESTING = True
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH', Config.FIREBASE_CREDENTIALS_PATH)
    # 테스트에서는 느린 원격 호출을 빨리 끊고 재시도하지 않습니다.
    REMOTE_TIMEOUT_SECONDS = 1.0
    READ_RETRIES = 0


class ProductionConfig(Config):
    """운영 환경을 위한 설정 클래스입니다."""


# WIDGET_ENV 값에 따라 create_widget 에서 적절한 설정 클래스를 선택합니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)
