# comment_widget/services/firestore_service.py
"""
원격 문서 저장소(Firestore) 접근 계층.

- DocumentStore: 위젯 코어가 의존하는 저장소 계약
- call_remote: 시간 제한과 읽기 재시도를 적용하는 공용 호출 함수
- FirestoreService: firebase_admin Firestore 클라이언트를 사용하는 구현

firebase_admin 의 Firestore 클라이언트는 동기 API 이므로 모든 호출을 worker thread 에서
실행하여 이벤트 루프를 막지 않습니다.
"""
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, TypeVar

from firebase_admin import firestore
from google.api_core import exceptions as google_exceptions

from comment_widget.core.errors import RemoteUnavailableError
from comment_widget.utils.datetime_utils import DateTimeUtils

logger = logging.getLogger(__name__)

T = TypeVar('T')

# 저장소에서 읽은 문서: Firestore 필드 + 'id'(문서 ID)
Document = Dict[str, Any]


@dataclass(frozen=True)
class PageCursor:
    """정렬된 범위 조회에서 '이 문서 다음부터'를 가리키는 커서."""
    doc_id: Optional[str] = None
    created_at: Optional[datetime] = None


async def call_remote(func: Callable[..., T], *args, timeout: Optional[float] = None,
                      retries: int = 0, description: str = "원격 호출", **kwargs) -> T:
    """
    블로킹 함수를 worker thread 에서 실행하고 결과를 돌려줍니다.

    - timeout 초를 넘기면 RemoteUnavailableError 로 변환합니다. 스레드 자체는 취소되지 않습니다.
    - retries 는 멱등한 읽기에만 넘겨야 합니다.
    """
    attempt = 0
    while True:
        try:
            return await asyncio.wait_for(asyncio.to_thread(func, *args, **kwargs), timeout=timeout)
        except (asyncio.TimeoutError, google_exceptions.GoogleAPIError, ConnectionError, OSError) as e:
            if attempt < retries:
                attempt += 1
                logger.warning(f"{description} 실패, 재시도 {attempt}/{retries}: {e!r}")
                continue
            logger.error(f"{description} 실패: {e!r}", exc_info=True)
            raise RemoteUnavailableError(f"{description}에 실패했습니다. 잠시 후 다시 시도해주세요.") from e


class DocumentStore:
    """
    위젯 코어가 사용하는 원격 문서 저장소 계약.
    (a) 커서 기반 정렬 범위 조회, (b) 단건 읽기/쓰기, (c) 서버 타임스탬프,
    (d) 동등 조건 조회, (e) 원자적 필드 증가(지원하는 경우)를 제공합니다.
    """
    # 원자적 증가 연산을 지원하지 않는 저장소는 read-modify-write 로 대체합니다.
    supports_atomic_increment = False

    async def query_page(self, collection: str, order_field: str, limit: int,
                         start_after: Optional[PageCursor] = None) -> List[Document]:
        """order_field 내림차순으로 start_after 다음부터 최대 limit 건을 조회합니다."""
        raise NotImplementedError

    async def query_equal(self, collection: str, field_name: str, value: Any,
                          order_field: Optional[str] = None) -> List[Document]:
        """field_name == value 인 문서를 order_field 오름차순(생략 시 문서 ID 순)으로 조회합니다."""
        raise NotImplementedError

    async def list_all(self, collection: str) -> List[Document]:
        raise NotImplementedError

    async def get(self, collection: str, doc_id: str) -> Optional[Document]:
        raise NotImplementedError

    async def add(self, collection: str, data: Dict[str, Any], timestamp_field: str = 'createdAt') -> Document:
        """새 문서를 만들고 timestamp_field 에 서버 시각을 기록한 뒤, 저장된 문서를 돌려줍니다."""
        raise NotImplementedError

    async def set(self, collection: str, doc_id: str, data: Dict[str, Any], merge: bool = False) -> None:
        raise NotImplementedError

    async def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        raise NotImplementedError

    async def increment(self, collection: str, doc_id: str, field_path: str, amount: int = 1) -> None:
        raise NotImplementedError


class FirestoreService(DocumentStore):
    """
    firebase_admin Firestore 클라이언트 기반 DocumentStore 구현.
    읽기는 read_retries 만큼 재시도하고, 쓰기는 중복 방지 수단이 없으므로 재시도하지 않습니다.
    """
    supports_atomic_increment = True

    def __init__(self, client=None, timeout: Optional[float] = None, read_retries: int = 0):
        self.db = client or firestore.client()
        self.timeout = timeout
        self.read_retries = read_retries

    @staticmethod
    def _to_document(snapshot) -> Document:
        data = snapshot.to_dict() or {}
        data['id'] = snapshot.id
        return data

    async def _read(self, func, *args, description: str):
        return await call_remote(func, *args, timeout=self.timeout, retries=self.read_retries, description=description)

    async def _write(self, func, *args, description: str):
        return await call_remote(func, *args, timeout=self.timeout, retries=0, description=description)

    # --- 읽기 ---
    async def query_page(self, collection, order_field, limit, start_after=None):
        def _query():
            collection_ref = self.db.collection(collection)
            query = collection_ref.order_by(order_field, direction=firestore.Query.DESCENDING)
            if start_after is not None:
                cursor_doc = collection_ref.document(start_after.doc_id).get() if start_after.doc_id else None
                if cursor_doc is not None and cursor_doc.exists:
                    # 스냅샷 커서는 동일 타임스탬프를 문서 ID 로 구분해 줍니다.
                    query = query.start_after(cursor_doc)
                elif start_after.created_at is not None:
                    query = query.start_after({order_field: start_after.created_at})
            return [self._to_document(doc) for doc in query.limit(limit).stream()]

        return await self._read(_query, description=f"'{collection}' 페이지 조회")

    async def query_equal(self, collection, field_name, value, order_field=None):
        def _query():
            query = self.db.collection(collection).where(field_name, '==', value)
            if order_field:
                query = query.order_by(order_field)
            return [self._to_document(doc) for doc in query.stream()]

        return await self._read(_query, description=f"'{collection}' 조건 조회")

    async def list_all(self, collection):
        def _list():
            return [self._to_document(doc) for doc in self.db.collection(collection).stream()]

        return await self._read(_list, description=f"'{collection}' 전체 조회")

    async def get(self, collection, doc_id):
        def _get():
            snapshot = self.db.collection(collection).document(doc_id).get()
            return self._to_document(snapshot) if snapshot.exists else None

        return await self._read(_get, description=f"'{collection}/{doc_id}' 조회")

    # --- 쓰기 ---
    async def add(self, collection, data, timestamp_field='createdAt'):
        def _add():
            payload = DateTimeUtils.for_firestore(dict(data))
            payload[timestamp_field] = firestore.SERVER_TIMESTAMP
            _, doc_ref = self.db.collection(collection).add(payload)
            # 서버가 확정한 createdAt 을 얻기 위해 다시 읽습니다.
            return self._to_document(doc_ref.get())

        document = await self._write(_add, description=f"'{collection}' 문서 생성")
        logger.info(f"Firestore 저장 성공 (Collection: {collection}, Doc ID: {document['id']})")
        return document

    async def set(self, collection, doc_id, data, merge=False):
        def _set():
            self.db.collection(collection).document(doc_id).set(DateTimeUtils.for_firestore(dict(data)), merge=merge)

        await self._write(_set, description=f"'{collection}/{doc_id}' 저장")

    async def update(self, collection, doc_id, data):
        def _update():
            self.db.collection(collection).document(doc_id).update(DateTimeUtils.for_firestore(dict(data)))

        await self._write(_update, description=f"'{collection}/{doc_id}' 수정")

    async def increment(self, collection, doc_id, field_path, amount=1):
        def _increment():
            self.db.collection(collection).document(doc_id).update({field_path: firestore.Increment(amount)})

        await self._write(_increment, description=f"'{collection}/{doc_id}' {field_path} 증가")
