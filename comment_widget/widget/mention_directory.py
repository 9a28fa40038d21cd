# comment_widget/widget/mention_directory.py
import logging
from typing import Dict, List, Optional

from comment_widget.core.errors import WidgetError
from comment_widget.models.user import User
from comment_widget.schemas.document_loader import load_documents
from comment_widget.schemas.user_schema import UserDocumentSchema
from comment_widget.services.firestore_service import DocumentStore

logger = logging.getLogger(__name__)


class MentionDirectory:
    """
    멘션 후보가 될 사용자 목록을 메모리에 보관하는 세션 단위 인덱스.
    세션마다 한 번 load() 하며, 불러오기에 실패하면 빈 목록으로 남아
    멘션 추천만 조용히 비활성화됩니다.
    """
    def __init__(self, store: DocumentStore, users_collection: str = 'Users'):
        self.store = store
        self.users_collection = users_collection
        self._users: List[User] = []
        self._by_id: Dict[str, User] = {}
        self._loaded = False

    @property
    def users(self) -> List[User]:
        return list(self._users)

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    async def load(self) -> List[User]:
        """사용자 목록을 불러옵니다. 이미 성공적으로 불러왔다면 원격 호출 없이 캐시를 돌려줍니다."""
        if self._loaded:
            return self.users

        try:
            documents = await self.store.list_all(self.users_collection)
            users = load_documents(UserDocumentSchema(), documents, "사용자")
        except WidgetError as e:
            logger.error(f"사용자 목록 조회 중 오류 발생: {e}", exc_info=True)
            return []

        self._users = users
        self._by_id = {user.id: user for user in users}
        self._loaded = True
        logger.info(f"멘션 사용자 목록 로드 완료: {len(users)}명")
        return self.users

    def query_prefix(self, prefix: str) -> List[User]:
        """
        표시 이름에 prefix 가 (대소문자 구분 없이) 포함된 사용자를 디렉터리 순서대로 반환합니다.
        이름 앞부분뿐 아니라 어디에 포함되어도 일치로 봅니다.
        """
        if not prefix:
            return []
        needle = prefix.casefold()
        return [user for user in self._users if needle in user.display_name.casefold()]

    def get(self, user_id: str) -> Optional[User]:
        return self._by_id.get(user_id)
