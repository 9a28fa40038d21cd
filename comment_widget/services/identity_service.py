# comment_widget/services/identity_service.py
import asyncio
import logging
from typing import Callable, Dict, Any, Optional

from firebase_admin import auth as firebase_auth
from firebase_admin import exceptions as firebase_exceptions

from comment_widget.core.errors import AuthRequiredError, RemoteUnavailableError
from comment_widget.models.user import SignedInUser
from comment_widget.services.firestore_service import DocumentStore

logger = logging.getLogger(__name__)


class IdentityService:
    """
    현재 로그인 사용자를 관리하는 인증 제공자 어댑터.
    - Firebase ID 토큰을 검증해 로그인 상태를 만들고
    - 멘션 후보 목록에 나타날 수 있도록 'Users/<uid>' 문서를 갱신합니다.
    """
    def __init__(self, store: DocumentStore, users_collection: str = 'Users',
                 verify_token: Optional[Callable[[str], Dict[str, Any]]] = None):
        self.store = store
        self.users_collection = users_collection
        self._verify_token = verify_token or firebase_auth.verify_id_token
        self._current_user: Optional[SignedInUser] = None

    @property
    def current_user(self) -> Optional[SignedInUser]:
        return self._current_user

    def require_user(self) -> SignedInUser:
        """쓰기 작업 전에 호출합니다. 로그인하지 않았다면 AuthRequiredError 를 발생시킵니다."""
        if self._current_user is None:
            raise AuthRequiredError("댓글을 작성하려면 로그인이 필요합니다.")
        return self._current_user

    async def sign_in(self, id_token: str) -> SignedInUser:
        """ID 토큰을 검증하고 현재 사용자로 설정합니다."""
        try:
            claims = await asyncio.to_thread(self._verify_token, id_token)
        except (firebase_auth.InvalidIdTokenError, ValueError) as e:
            logger.warning(f"ID 토큰 검증 실패: {e}")
            raise AuthRequiredError("로그인 정보가 유효하지 않습니다.") from e
        except firebase_exceptions.FirebaseError as e:
            logger.error(f"ID 토큰 검증 중 Firebase 오류: {e}", exc_info=True)
            raise RemoteUnavailableError("로그인 처리 중 오류가 발생했습니다.") from e

        user = SignedInUser(
            uid=claims['uid'],
            display_name=claims.get('name') or "",
            email=claims.get('email') or "",
            photo_url=claims.get('picture'),
        )

        await self.store.set(self.users_collection, user.uid, {
            'uid': user.uid,
            'email': user.email,
            'displayName': user.display_name,
        })

        self._current_user = user
        logger.info(f"사용자 로그인 완료 (uid: {user.uid})")
        return user

    def sign_out(self) -> None:
        if self._current_user is not None:
            logger.info(f"사용자 로그아웃 처리 완료 (uid: {self._current_user.uid})")
        self._current_user = None
