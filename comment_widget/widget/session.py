# comment_widget/widget/session.py
import logging
from datetime import datetime
from typing import Awaitable, Callable, Dict, List, Optional, TypeVar, Union

from comment_widget.core.errors import (
    AuthRequiredError, PartialWriteError, RemoteUnavailableError, WidgetError
)
from comment_widget.models.attachment import Attachment
from comment_widget.models.comment import Comment
from comment_widget.models.reaction import ReactionKind, ReactionSet
from comment_widget.models.reply import Reply
from comment_widget.models.user import SignedInUser
from comment_widget.services.firestore_service import DocumentStore
from comment_widget.services.identity_service import IdentityService
from comment_widget.services.notice_service import NoticeLevel, NoticeService
from comment_widget.services.storage_service import StorageService
from comment_widget.widget.comment_feed import CommentFeed
from comment_widget.widget.composition import CompositionSession, DraftKind
from comment_widget.widget.mention_directory import MentionDirectory
from comment_widget.widget.reaction_counter import ReactionCounter
from comment_widget.widget.reply_thread import ReplyThread

logger = logging.getLogger(__name__)

T = TypeVar('T')


class CommentWidget:
    """
    댓글 위젯 세션 하나를 표현하는 진입점.

    세션 범위의 MentionDirectory, CommentFeed, 답글 스레드, 작성 중인 초안들을 소유하고,
    모든 사용자 동작을 작업 경계에서 처리합니다. WidgetError 는 여기서 잡혀 알림으로 바뀌며,
    실패한 동작 이전의 로컬 캐시는 그대로 유효합니다.
    """
    def __init__(self, store: DocumentStore, storage: StorageService, identity: IdentityService,
                 notices: Optional[NoticeService] = None, config=None):
        self.store = store
        self.storage = storage
        self.identity = identity
        self.notices = notices or NoticeService()

        self.comments_collection = getattr(config, 'COMMENTS_COLLECTION', 'comments')
        self.replies_collection = getattr(config, 'REPLIES_COLLECTION', 'Reply')
        self.max_length = getattr(config, 'MAX_CONTENT_LENGTH', 250)

        self.directory = MentionDirectory(store, getattr(config, 'USERS_COLLECTION', 'Users'))
        self.feed = CommentFeed(store, self.comments_collection, getattr(config, 'PAGE_SIZE', 10))
        self.reactions = ReactionCounter(store, self.comments_collection)
        self.comment_draft = CompositionSession(self.directory, identity, DraftKind.COMMENT, self.max_length)
        self._threads: Dict[str, ReplyThread] = {}
        self._reply_drafts: Dict[str, CompositionSession] = {}

    # --- 작업 경계 ---
    async def _guard(self, action: str, operation: Awaitable[T]) -> Optional[T]:
        try:
            return await operation
        except WidgetError as e:
            level = NoticeLevel.INFO if isinstance(e, AuthRequiredError) else NoticeLevel.ERROR
            logger.warning(f"{action} 실패 ({e.error_code}): {e.message}")
            self.notices.notify(level, e.message, e.error_code)
            return None

    async def _write_with_attachment(self, attachment: Optional[Attachment],
                                     write: Callable[[Optional[str]], Awaitable[T]]) -> T:
        """첨부파일이 있으면 먼저 업로드하고, 업로드가 실패하면 레코드를 쓰지 않습니다."""
        file_url = await self.storage.upload(attachment) if attachment is not None else None
        try:
            return await write(file_url)
        except RemoteUnavailableError as e:
            if file_url:
                # 업로드된 파일은 되돌리지 않습니다.
                raise PartialWriteError("첨부파일은 업로드되었지만 글을 저장하지 못했습니다.", file_url=file_url) from e
            raise

    # --- 세션 ---
    @property
    def current_user(self) -> Optional[SignedInUser]:
        return self.identity.current_user

    async def start(self, now: Optional[datetime] = None) -> Optional[List[Comment]]:
        """멘션 사용자 목록과 댓글 첫 페이지를 불러옵니다."""
        await self.directory.load()
        return await self._guard("댓글 불러오기", self.feed.initial_load(now=now))

    async def sign_in(self, id_token: str) -> Optional[SignedInUser]:
        user = await self._guard("로그인", self.identity.sign_in(id_token))
        if user is not None:
            self.notices.notify(NoticeLevel.SUCCESS, "로그인되었습니다.")
        return user

    def sign_out(self) -> None:
        self.identity.sign_out()
        self.notices.notify(NoticeLevel.SUCCESS, "로그아웃되었습니다.")

    # --- 댓글 ---
    async def load_more(self, now: Optional[datetime] = None) -> Optional[List[Comment]]:
        return await self._guard("댓글 더 불러오기", self.feed.load_more(now=now))

    async def _submit_comment(self, attachment: Optional[Attachment]) -> Comment:
        draft = self.comment_draft.submit()
        comment = await self._write_with_attachment(
            attachment,
            lambda file_url: self.feed.create(draft.author, draft.finalized_content, draft.mentions, file_url)
        )
        self.comment_draft.reset()
        return comment

    async def submit_comment(self, attachment: Optional[Attachment] = None) -> Optional[Comment]:
        return await self._guard("댓글 작성", self._submit_comment(attachment))

    async def _react(self, comment_id: str, kind: Union[ReactionKind, str]) -> Optional[ReactionSet]:
        reactions = await self.reactions.react(comment_id, kind, self.identity.current_user)
        if reactions is not None and not self.feed.apply_reaction(comment_id, reactions):
            logger.debug(f"로컬 목록에 없는 댓글의 반응입니다 (comment_id: {comment_id})")
        return reactions

    async def react(self, comment_id: str, kind: Union[ReactionKind, str]) -> Optional[ReactionSet]:
        return await self._guard("반응 남기기", self._react(comment_id, kind))

    # --- 답글 ---
    def thread(self, comment_id: str) -> ReplyThread:
        if comment_id not in self._threads:
            self._threads[comment_id] = ReplyThread(
                self.store, comment_id, self.replies_collection, self.max_length
            )
        return self._threads[comment_id]

    def reply_draft(self, comment_id: str) -> CompositionSession:
        if comment_id not in self._reply_drafts:
            self._reply_drafts[comment_id] = CompositionSession(
                self.directory, self.identity, DraftKind.REPLY, self.max_length
            )
        return self._reply_drafts[comment_id]

    async def _open_replies(self, comment_id: str) -> List[Reply]:
        replies = await self.thread(comment_id).fetch()
        self.feed.set_replies(comment_id, replies)
        return replies

    async def open_replies(self, comment_id: str) -> Optional[List[Reply]]:
        return await self._guard("답글 불러오기", self._open_replies(comment_id))

    async def _submit_reply(self, comment_id: str, attachment: Optional[Attachment]) -> Reply:
        draft_session = self.reply_draft(comment_id)
        draft = draft_session.submit()
        thread = self.thread(comment_id)
        reply = await self._write_with_attachment(
            attachment,
            lambda file_url: thread.append(draft.finalized_content, draft.mentions, file_url, author=draft.author)
        )
        self.feed.append_reply(comment_id, reply)
        draft_session.reset()
        return reply

    async def submit_reply(self, comment_id: str, attachment: Optional[Attachment] = None) -> Optional[Reply]:
        return await self._guard("답글 작성", self._submit_reply(comment_id, attachment))
