# comment_widget/widget/reply_thread.py
import logging
from typing import List, Optional, Sequence

from comment_widget.core.errors import AuthRequiredError
from comment_widget.models.reply import Reply
from comment_widget.models.user import SignedInUser
from comment_widget.schemas.draft_schema import validate_content
from comment_widget.schemas.document_loader import load_document, load_documents
from comment_widget.schemas.reply_schema import ReplyDocumentSchema
from comment_widget.services.firestore_service import DocumentStore

logger = logging.getLogger(__name__)


def comment_ref(comment_id: str) -> str:
    return f"comments/{comment_id}"


def author_ref(uid: str) -> str:
    return f"Users/{uid}"


class ReplyThread:
    """
    댓글 하나에 달린 답글 목록. 필요할 때 한 번에 조회하며 페이지네이션은 없습니다.
    조회 결과는 createdAt 오름차순이고, 이후 작성한 답글은 도착 순서대로 끝에 쌓이므로
    동시 작성 시 createdAt 순서와 다를 수 있습니다.
    """
    def __init__(self, store: DocumentStore, comment_id: str,
                 replies_collection: str = 'Reply', max_length: int = 250):
        self.store = store
        self.comment_id = comment_id
        self.replies_collection = replies_collection
        self.max_length = max_length
        self._replies: List[Reply] = []
        self._schema = ReplyDocumentSchema()

    @property
    def replies(self) -> List[Reply]:
        return list(self._replies)

    async def fetch(self) -> List[Reply]:
        """commentId 가 이 댓글을 가리키는 답글을 createdAt 오름차순으로 모두 조회하여 로컬 목록을 교체합니다."""
        documents = await self.store.query_equal(
            self.replies_collection, 'commentId', comment_ref(self.comment_id), order_field='createdAt'
        )
        self._replies = load_documents(self._schema, documents, "답글")
        logger.info(f"답글 조회 완료 (comment_id: {self.comment_id}, {len(self._replies)}건)")
        return self.replies

    async def append(self, body: str, mentions: Sequence[str], file_url: Optional[str] = None,
                     author: Optional[SignedInUser] = None) -> Reply:
        """
        답글을 저장하고 로컬 목록 끝에 추가합니다.
        - 본문은 1~max_length 자여야 합니다 (ValidationError)
        - 로그인 사용자가 필요합니다 (AuthRequiredError)
        """
        body = validate_content(body, self.max_length)
        if author is None:
            raise AuthRequiredError("답글을 작성하려면 로그인이 필요합니다.")

        document = await self.store.add(self.replies_collection, {
            'body': body,
            'fileUrl': file_url or "",
            'mentions': list(mentions),
            'author': author_ref(author.uid),
            'commentId': comment_ref(self.comment_id),
        })
        reply = load_document(self._schema, document, "답글")
        self._replies.append(reply)
        logger.info(f"답글 생성 완료 (reply_id: {reply.id}, comment_id: {self.comment_id})")
        return reply
