# comment_widget/services/storage_service.py
import uuid
import logging
from typing import Optional

from firebase_admin import storage

from comment_widget.models.attachment import Attachment
from comment_widget.services.firestore_service import call_remote

logger = logging.getLogger(__name__)


class StorageService:
    """
    Firebase Storage 관련 로직을 담당하는 서비스 클래스입니다.
    댓글/답글 첨부파일을 업로드하고 공개 URL 을 돌려줍니다.
    """

    def __init__(self):
        """
        클래스 인스턴스 생성 시 버킷을 None으로 초기화합니다.
        실제 버킷 객체는 init_app 메서드를 통해 주입됩니다.
        """
        self.bucket = None
        self.upload_folder = 'uploads'
        self.timeout: Optional[float] = None

    def init_app(self, config, bucket=None):
        """
        create_widget 초기화 과정에서 호출되어 Storage 버킷을 설정합니다.

        :param config: 설정 클래스 (FIREBASE_STORAGE_BUCKET, UPLOAD_FOLDER, REMOTE_TIMEOUT_SECONDS)
        :param bucket: 테스트 등에서 직접 주입할 버킷 객체
        """
        bucket_name = getattr(config, 'FIREBASE_STORAGE_BUCKET', None)
        if bucket is None and not bucket_name:
            raise ValueError("FIREBASE_STORAGE_BUCKET 설정이 .env 또는 설정 파일에 필요합니다.")

        self.bucket = bucket or storage.bucket(bucket_name)
        self.upload_folder = getattr(config, 'UPLOAD_FOLDER', self.upload_folder)
        self.timeout = getattr(config, 'REMOTE_TIMEOUT_SECONDS', None)
        logger.info("StorageService: Firebase Storage 서비스가 성공적으로 초기화되었습니다.")

    def _upload_blocking(self, attachment: Attachment) -> str:
        # 같은 이름의 파일이 서로 덮어쓰지 않도록 접두어를 붙입니다.
        destination_blob_name = f"{self.upload_folder}/{uuid.uuid4().hex}_{attachment.filename}"
        blob = self.bucket.blob(destination_blob_name)
        blob.upload_from_string(attachment.content, content_type=attachment.content_type)
        blob.make_public()
        return blob.public_url

    async def upload(self, attachment: Attachment) -> str:
        """
        첨부파일을 업로드하고 공개적으로 접근 가능한 URL 을 반환합니다.
        실패 시 RemoteUnavailableError 가 발생하며, 업로드는 재시도하지 않습니다.
        """
        if not self.bucket:
            raise RuntimeError("StorageService가 초기화되지 않았습니다. init_app을 먼저 호출해주세요.")

        url = await call_remote(self._upload_blocking, attachment, timeout=self.timeout,
                                description=f"첨부파일 업로드({attachment.filename})")
        logger.info(f"첨부파일 업로드 완료: {attachment.filename}")
        return url
