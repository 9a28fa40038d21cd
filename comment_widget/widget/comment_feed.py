# comment_widget/widget/comment_feed.py
import logging
from dataclasses import replace
from datetime import datetime
from typing import List, Optional, Tuple

from comment_widget.models.comment import Comment
from comment_widget.models.reaction import ReactionSet
from comment_widget.models.reply import Reply
from comment_widget.models.user import SignedInUser
from comment_widget.schemas.comment_schema import CommentDocumentSchema
from comment_widget.schemas.document_loader import load_document, load_documents
from comment_widget.services.firestore_service import DocumentStore, PageCursor
from comment_widget.utils.datetime_utils import DateTimeUtils

logger = logging.getLogger(__name__)


class CommentFeed:
    """
    댓글 목록의 로컬 캐시와 커서 기반 페이지네이션을 담당합니다.

    상태:
    - 초기: 목록이 비어 있고 커서가 없음
    - 로드됨: createdAt 내림차순 목록, 커서 = 마지막(가장 오래된) 댓글
    - 추가 로드 중: load_more 가 진행 중인 동안에는 다른 load_more 호출을 무시

    로컬 캐시는 원격 작업이 끝난 뒤에만 변경됩니다. 조회가 실패하면 기존 목록과 커서를 그대로 둡니다.
    """
    def __init__(self, store: DocumentStore, comments_collection: str = 'comments', page_size: int = 10):
        self.store = store
        self.comments_collection = comments_collection
        self.page_size = page_size
        self._comments: List[Comment] = []
        self._cursor: Optional[PageCursor] = None
        self._loading_more = False
        self._has_more = True
        self._schema = CommentDocumentSchema()

    @property
    def comments(self) -> List[Comment]:
        return list(self._comments)

    @property
    def cursor(self) -> Optional[PageCursor]:
        return self._cursor

    @property
    def is_loading_more(self) -> bool:
        return self._loading_more

    @property
    def has_more(self) -> bool:
        return self._has_more

    def __len__(self) -> int:
        return len(self._comments)

    def get(self, comment_id: str) -> Optional[Comment]:
        return next((c for c in self._comments if c.id == comment_id), None)

    @staticmethod
    def _cursor_for(comment: Comment) -> PageCursor:
        return PageCursor(doc_id=comment.id, created_at=comment.created_at)

    @staticmethod
    def _cursor_for_document(document) -> PageCursor:
        # 형식 오류로 건너뛴 문서도 커서 위치에는 포함됩니다.
        try:
            created_at = DateTimeUtils.from_firestore(document.get('createdAt'))
        except (TypeError, ValueError, OverflowError):
            created_at = None
        return PageCursor(doc_id=document['id'], created_at=created_at)

    async def _fetch_page(self, start_after: Optional[PageCursor]) -> Tuple[List[Comment], Optional[PageCursor], bool]:
        """(읽어 들인 댓글, 마지막 원본 문서의 커서, 다음 페이지 존재 여부)를 반환합니다."""
        documents = await self.store.query_page(
            self.comments_collection, 'createdAt', self.page_size, start_after=start_after
        )
        page = load_documents(self._schema, documents, "댓글")
        cursor = self._cursor_for_document(documents[-1]) if documents else None
        return page, cursor, len(documents) >= self.page_size

    async def initial_load(self, now: Optional[datetime] = None) -> List[Comment]:
        """
        첫 페이지를 불러와 로컬 목록 전체를 교체합니다. 여러 번 호출해도 병합하지 않고 교체합니다.

        :param now: 지정하면 이 시각보다 오래된 댓글부터 불러옵니다.
        """
        start_after = PageCursor(created_at=now) if now is not None else None
        page, cursor, has_more = await self._fetch_page(start_after)

        self._comments = page
        self._cursor = cursor
        self._has_more = has_more
        logger.info(f"댓글 첫 페이지 로드 완료: {len(page)}건")
        return list(page)

    async def load_more(self, now: Optional[datetime] = None) -> List[Comment]:
        """
        커서 다음 페이지를 불러와 목록 끝에 붙입니다.

        커서가 없으면(목록이 비어 있으면) now 이전부터 조회하므로 첫 페이지가 다시 조회될 수 있습니다.
        이미 추가 로드가 진행 중이면 조회하지 않고 빈 목록을 반환합니다.

        :param now: 커서가 없을 때의 기준 시각. 생략하면 현재 UTC 시각을 사용합니다.
        """
        if self._loading_more:
            logger.debug("이미 댓글을 추가로 불러오는 중이므로 요청을 무시합니다.")
            return []

        self._loading_more = True
        try:
            start_after = self._cursor or PageCursor(created_at=now or DateTimeUtils.now())
            page, cursor, has_more = await self._fetch_page(start_after)
        finally:
            self._loading_more = False

        self._comments.extend(page)
        if cursor is not None:
            self._cursor = cursor
        self._has_more = has_more
        logger.info(f"댓글 추가 로드 완료: {len(page)}건 (총 {len(self._comments)}건)")
        return list(page)

    async def create(self, author: SignedInUser, content: str, mentions: List[str],
                     file_url: Optional[str] = None) -> Comment:
        """
        새 최상위 댓글을 저장하고, 저장이 끝나면 목록 맨 앞(최신)에 추가합니다.
        """
        document = await self.store.add(self.comments_collection, {
            'text': content,
            'fileUrl': file_url or "",
            'mentions': list(mentions),
            'userId': author.uid,
            'username': author.display_name or "",
            'userPhoto': author.photo_url or "",
            'parentId': "",
            'reactions': ReactionSet().to_dict(),
        })
        comment = load_document(self._schema, document, "댓글")
        self._comments.insert(0, comment)
        if self._cursor is None:
            self._cursor = self._cursor_for(comment)
        logger.info(f"댓글 생성 완료 (comment_id: {comment.id}, mentions: {len(comment.mentions)}건)")
        return comment

    def apply_reaction(self, comment_id: str, reactions: ReactionSet) -> bool:
        """로컬 댓글의 반응 값을 교체합니다. 해당 댓글이 없으면 아무것도 하지 않고 False."""
        for index, comment in enumerate(self._comments):
            if comment.id == comment_id:
                self._comments[index] = replace(comment, reactions=reactions)
                return True
        return False

    def append_reply(self, comment_id: str, reply: Reply) -> bool:
        """로컬 댓글의 답글 목록 끝에 답글을 추가합니다. 해당 댓글이 없으면 False."""
        comment = self.get(comment_id)
        if comment is None:
            return False
        comment.replies = (comment.replies or []) + [reply]
        return True

    def set_replies(self, comment_id: str, replies: List[Reply]) -> bool:
        comment = self.get(comment_id)
        if comment is None:
            return False
        comment.replies = list(replies)
        return True
