# conftest.py
"""
공용 테스트 픽스처

- InMemoryDocumentStore: Firestore 대신 사용하는 메모리 저장소 (DocumentStore 계약 구현)
- FakeBucket: Firebase Storage 버킷 대역
- 25건의 정렬된 댓글 픽스처, 멘션 사용자 픽스처
"""
import copy
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import pytest

from comment_widget.core.config import TestingConfig
from comment_widget.core.errors import RemoteUnavailableError
from comment_widget.services.firestore_service import DocumentStore, PageCursor
from comment_widget.services.identity_service import IdentityService
from comment_widget.services.notice_service import NoticeService
from comment_widget.services.storage_service import StorageService
from comment_widget.widget.session import CommentWidget

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class InMemoryDocumentStore(DocumentStore):
    """Firestore 의 정렬/커서/서버 타임스탬프 동작을 흉내 내는 메모리 저장소"""

    def __init__(self, supports_atomic_increment: bool = True):
        self.supports_atomic_increment = supports_atomic_increment
        self.collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.writes: List[tuple] = []
        self.fail_reads = False
        self.fail_writes = False
        self._clock = BASE_TIME + timedelta(hours=1)
        self._next_id = 0

    # --- 테스트 도우미 ---
    def seed(self, collection: str, doc_id: str, data: Dict[str, Any]) -> None:
        self.collections.setdefault(collection, {})[doc_id] = copy.deepcopy(data)

    def raw(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        return self.collections.get(collection, {}).get(doc_id)

    def _check_read(self):
        if self.fail_reads:
            raise RemoteUnavailableError("읽기 실패 (테스트)")

    def _check_write(self):
        if self.fail_writes:
            raise RemoteUnavailableError("쓰기 실패 (테스트)")

    def _document(self, collection: str, doc_id: str) -> Dict[str, Any]:
        data = copy.deepcopy(self.collections[collection][doc_id])
        data['id'] = doc_id
        return data

    # --- DocumentStore 계약 ---
    async def query_page(self, collection, order_field, limit, start_after: Optional[PageCursor] = None):
        self._check_read()
        docs = self.collections.get(collection, {})
        ordered = sorted(docs, key=lambda doc_id: (docs[doc_id][order_field], doc_id), reverse=True)

        if start_after is not None:
            if start_after.doc_id in docs:
                cursor_key = (docs[start_after.doc_id][order_field], start_after.doc_id)
                ordered = [d for d in ordered if (docs[d][order_field], d) < cursor_key]
            elif start_after.created_at is not None:
                ordered = [d for d in ordered if docs[d][order_field] < start_after.created_at]
        return [self._document(collection, d) for d in ordered[:limit]]

    async def query_equal(self, collection, field_name, value, order_field=None):
        self._check_read()
        docs = self.collections.get(collection, {})
        matched = sorted(d for d, data in docs.items() if data.get(field_name) == value)
        if order_field:
            # Firestore 처럼 정렬 필드가 없는 문서는 결과에서 빠집니다.
            matched = sorted((d for d in matched if docs[d].get(order_field) is not None),
                             key=lambda d: (docs[d][order_field], d))
        return [self._document(collection, d) for d in matched]

    async def list_all(self, collection):
        self._check_read()
        return [self._document(collection, d) for d in self.collections.get(collection, {})]

    async def get(self, collection, doc_id):
        self._check_read()
        if doc_id not in self.collections.get(collection, {}):
            return None
        return self._document(collection, doc_id)

    async def add(self, collection, data, timestamp_field='createdAt'):
        self._check_write()
        self._next_id += 1
        self._clock += timedelta(seconds=1)
        doc_id = f"new{self._next_id:03d}"
        payload = copy.deepcopy(data)
        payload[timestamp_field] = self._clock
        self.seed(collection, doc_id, payload)
        self.writes.append(('add', collection, doc_id))
        return self._document(collection, doc_id)

    async def set(self, collection, doc_id, data, merge=False):
        self._check_write()
        existing = self.collections.get(collection, {}).get(doc_id, {}) if merge else {}
        self.seed(collection, doc_id, {**existing, **data})
        self.writes.append(('set', collection, doc_id))

    async def update(self, collection, doc_id, data):
        self._check_write()
        document = self.collections[collection][doc_id]
        document.update(copy.deepcopy(data))
        self.writes.append(('update', collection, doc_id))

    async def increment(self, collection, doc_id, field_path, amount=1):
        self._check_write()
        target = self.collections[collection][doc_id]
        *parents, leaf = field_path.split('.')
        for key in parents:
            target = target.setdefault(key, {})
        target[leaf] = target.get(leaf, 0) + amount
        self.writes.append(('increment', collection, doc_id))


class FakeBlob:
    def __init__(self, bucket, name):
        self.bucket = bucket
        self.name = name
        self.public_url = f"https://storage.example.com/{name}"

    def upload_from_string(self, content, content_type=None):
        if self.bucket.fail:
            raise ConnectionError("업로드 실패 (테스트)")
        self.bucket.uploaded[self.name] = (content, content_type)

    def make_public(self):
        pass


class FakeBucket:
    def __init__(self):
        self.uploaded: Dict[str, tuple] = {}
        self.fail = False

    def blob(self, name):
        return FakeBlob(self, name)


USERS = {
    "u1": {"uid": "u1", "displayName": "Anna", "email": "anna@example.com"},
    "u2": {"uid": "u2", "displayName": "Banana", "email": "banana@example.com"},
    "u3": {"uid": "u3", "displayName": "Bob", "email": "bob@example.com"},
}


def fake_verify_token(id_token: str) -> Dict[str, Any]:
    """'token-<uid>' 형태의 토큰만 유효한 것으로 취급합니다."""
    if not id_token.startswith("token-") or id_token[6:] not in USERS:
        raise ValueError("invalid token")
    user = USERS[id_token[6:]]
    return {"uid": user["uid"], "name": user["displayName"], "email": user["email"], "picture": None}


def comment_document(index: int) -> Dict[str, Any]:
    """index 가 작을수록 최신 댓글입니다."""
    return {
        "text": f"comment {index}",
        "fileUrl": "",
        "mentions": [],
        "userId": "u3",
        "username": "Bob",
        "userPhoto": "",
        "parentId": "",
        "createdAt": BASE_TIME - timedelta(minutes=index),
        "reactions": {"like": 0, "love": 0, "laugh": 0, "angry": 0},
    }


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def seeded_store(store):
    """사용자 3명과 25건의 댓글(c01 이 가장 최신)이 들어 있는 저장소"""
    for uid, data in USERS.items():
        store.seed('Users', uid, data)
    for index in range(1, 26):
        store.seed('comments', f"c{index:02d}", comment_document(index))
    return store


@pytest.fixture
def identity(seeded_store):
    return IdentityService(seeded_store, users_collection='Users', verify_token=fake_verify_token)


@pytest.fixture
def bucket():
    return FakeBucket()


@pytest.fixture
def storage(bucket):
    service = StorageService()
    service.init_app(TestingConfig, bucket=bucket)
    return service


@pytest.fixture
def notices():
    return NoticeService()


@pytest.fixture
def widget(seeded_store, storage, identity, notices):
    return CommentWidget(seeded_store, storage, identity, notices, config=TestingConfig)
