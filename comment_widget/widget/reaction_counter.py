# comment_widget/widget/reaction_counter.py
import logging
from dataclasses import replace
from typing import Optional, Union

from comment_widget.core.errors import AuthRequiredError, InvalidDocumentError, ValidationError
from comment_widget.models.reaction import ReactionKind, ReactionSet
from comment_widget.models.user import SignedInUser
from comment_widget.services.firestore_service import DocumentStore

logger = logging.getLogger(__name__)


def to_reaction_kind(kind: Union[ReactionKind, str]) -> ReactionKind:
    """문자열 반응 종류를 ReactionKind 로 변환합니다. 알 수 없는 값이면 ValidationError."""
    if isinstance(kind, ReactionKind):
        return kind
    try:
        return ReactionKind(kind)
    except ValueError as e:
        raise ValidationError(f"알 수 없는 반응 종류입니다: {kind}") from e


def increment(current: Optional[ReactionSet], kind: Union[ReactionKind, str]) -> ReactionSet:
    """kind 에 해당하는 값만 1 증가시킨 새 ReactionSet 을 반환합니다. 나머지 값은 그대로입니다."""
    kind = to_reaction_kind(kind)
    current = current or ReactionSet()
    return replace(current, **{kind.value: current.get(kind) + 1})


def reactions_of(document) -> ReactionSet:
    """댓글 문서의 reactions 필드를 읽습니다. 숫자가 아닌 값이 있으면 InvalidDocumentError."""
    try:
        return ReactionSet.from_mapping(document.get('reactions'))
    except (TypeError, ValueError, AttributeError) as e:
        raise InvalidDocumentError("저장된 반응 데이터를 읽을 수 없습니다.",
                                   details={'doc_id': document.get('id')}) from e


class ReactionCounter:
    """
    댓글의 반응 카운터를 원격 저장소와 동기화합니다.

    저장소가 원자적 증가를 지원하면 그것을 사용하고, 지원하지 않으면
    읽기 -> 증가 -> 전체 쓰기(read-modify-write)로 대체합니다.
    후자는 다른 세션의 동시 증가와 경합하면 한쪽 증가가 사라질 수 있습니다(마지막 쓰기 우선).
    """
    def __init__(self, store: DocumentStore, comments_collection: str = 'comments'):
        self.store = store
        self.comments_collection = comments_collection

    async def react(self, comment_id: str, kind: Union[ReactionKind, str],
                    user: Optional[SignedInUser]) -> Optional[ReactionSet]:
        """
        반응을 1 증가시키고 원격 저장소의 최신 반응 값을 돌려줍니다.
        댓글 문서가 없으면 아무것도 쓰지 않고 None 을 반환합니다.
        """
        if user is None:
            raise AuthRequiredError("반응을 남기려면 로그인이 필요합니다.")
        kind = to_reaction_kind(kind)

        document = await self.store.get(self.comments_collection, comment_id)
        if document is None:
            logger.warning(f"반응을 남길 댓글을 찾을 수 없습니다 (comment_id: {comment_id})")
            return None

        current = reactions_of(document)
        if self.store.supports_atomic_increment:
            await self.store.increment(self.comments_collection, comment_id, f"reactions.{kind.value}")
            refreshed = await self.store.get(self.comments_collection, comment_id)
            reactions = reactions_of(refreshed) if refreshed is not None else increment(current, kind)
        else:
            reactions = increment(current, kind)
            await self.store.update(self.comments_collection, comment_id, {'reactions': reactions.to_dict()})

        logger.info(f"댓글 반응 반영 완료 (comment_id: {comment_id}, kind: {kind.value}, uid: {user.uid})")
        return reactions
