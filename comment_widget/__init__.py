# comment_widget/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from typing import Optional

import firebase_admin
from firebase_admin import credentials

# - 설정
from comment_widget.core.config import config_by_name

# - 서비스 모듈
from comment_widget.services.firestore_service import FirestoreService
from comment_widget.services.storage_service import StorageService
from comment_widget.services.identity_service import IdentityService
from comment_widget.services.notice_service import NoticeService

# - 위젯 세션
from comment_widget.widget.session import CommentWidget


def create_widget(config_name: Optional[str] = None) -> CommentWidget:
    """
    댓글 위젯 팩토리 함수.
    설정을 고르고 Firebase Admin SDK 를 초기화한 뒤, 서비스들을 주입한 CommentWidget 을 반환합니다.
    """
    # =====================================================================================
    # 3. 설정 선택
    # =====================================================================================
    config_name = config_name or os.getenv('WIDGET_ENV', 'development')
    if config_name not in config_by_name:
        raise ValueError(f"알 수 없는 설정 이름입니다: {config_name}")
    config = config_by_name[config_name]

    if not config.DEBUG:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')
    else:
        logging.basicConfig(level=logging.DEBUG)

    # =====================================================================================
    # 4. 외부 서비스 초기화
    # =====================================================================================
    if not firebase_admin._apps:
        cred_path = config.FIREBASE_CREDENTIALS_PATH
        if not cred_path or not os.path.exists(cred_path):
            raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
        cred = credentials.Certificate(cred_path)
        firebase_admin.initialize_app(cred, {
            'storageBucket': config.FIREBASE_STORAGE_BUCKET
        })

    # =====================================================================================
    # 5. 서비스 인스턴스 생성 (의존성 주입)
    # =====================================================================================
    services = {}

    services['store'] = FirestoreService(
        timeout=config.REMOTE_TIMEOUT_SECONDS,
        read_retries=config.READ_RETRIES
    )

    try:
        storage_instance = StorageService()
        storage_instance.init_app(config)
        services['storage'] = storage_instance
        logging.info("Storage service initialized successfully")
    except Exception as e:
        logging.error(f"Failed to initialize storage service: {e}")
        raise

    services['identity'] = IdentityService(services['store'], users_collection=config.USERS_COLLECTION)
    services['notices'] = NoticeService()

    widget = CommentWidget(
        store=services['store'],
        storage=services['storage'],
        identity=services['identity'],
        notices=services['notices'],
        config=config
    )
    widget.services = services

    logging.info(f"Comment widget created for '{config_name}' environment.")
    return widget
