# comment_widget/widget/composition.py
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from comment_widget.models.user import SignedInUser, User
from comment_widget.schemas.draft_schema import validate_content
from comment_widget.services.identity_service import IdentityService
from comment_widget.widget import mention_parser
from comment_widget.widget.mention_directory import MentionDirectory

logger = logging.getLogger(__name__)


class DraftKind(Enum):
    """작성 중인 초안의 종류. 멘션 토큰과 추출 규칙이 달라집니다."""
    COMMENT = "comment"
    REPLY = "reply"


@dataclass(frozen=True)
class Suggestions:
    users: List[User] = field(default_factory=list)
    visible: bool = False


@dataclass(frozen=True)
class SubmittedDraft:
    """
    제출이 확정된 초안.
    - 댓글: finalized_content 는 마크업, mentions 는 표시 이름
    - 답글: finalized_content 는 평문, mentions 는 사용자 ID
    """
    finalized_content: str
    mentions: List[str]
    author: SignedInUser
    raw_content: str


class CompositionSession:
    """
    작성 중인 댓글/답글 초안 하나와 멘션 추천 상태를 관리합니다.

    - on_edit: 입력이 바뀔 때마다 끝의 '@검색어' 를 확인해 추천 목록을 갱신
    - select_suggestion: 트리거 구간을 멘션 토큰으로 교체 (mentions 목록은 건드리지 않음)
    - submit: 길이/로그인 확인 후 확정된 내용과 멘션 목록을 반환
    """
    def __init__(self, directory: MentionDirectory, identity: IdentityService,
                 kind: DraftKind = DraftKind.COMMENT, max_length: int = 250):
        self.directory = directory
        self.identity = identity
        self.kind = kind
        self.max_length = max_length
        self._content = ""
        self._suggestions = Suggestions()
        self._query: Optional[str] = None

    @property
    def content(self) -> str:
        return self._content

    @property
    def suggestions(self) -> Suggestions:
        return self._suggestions

    @property
    def query(self) -> Optional[str]:
        """현재 열린 트리거의 검색어. 트리거가 없으면 None."""
        return self._query

    def on_edit(self, raw_content: str) -> Suggestions:
        self._content = raw_content
        self._query = mention_parser.match_trigger(raw_content)

        if self._query is None:
            self._suggestions = Suggestions()
        else:
            # '@' 만 입력된 상태에서는 전체 사용자 목록을 보여줍니다.
            users = self.directory.query_prefix(self._query) if self._query else self.directory.users
            self._suggestions = Suggestions(users=users, visible=bool(users))
        return self._suggestions

    def select_suggestion(self, user: User) -> str:
        if self.kind is DraftKind.REPLY:
            self._content = mention_parser.insert_user_id_token(self._content, user)
        else:
            self._content = mention_parser.insert_display_name_token(self._content, user)
        self._query = None
        self._suggestions = Suggestions()
        return self._content

    def _finalize(self):
        if self.kind is DraftKind.REPLY:
            return mention_parser.to_plain_text(self._content), mention_parser.extract_user_ids(self._content)
        return self._content, mention_parser.extract_from_rich_markup(self._content)

    def submit(self) -> SubmittedDraft:
        """
        초안을 확정합니다. 내용이 비었거나 너무 길면 ValidationError,
        로그인하지 않았으면 AuthRequiredError 가 발생하며 이때 초안은 그대로 남습니다.
        """
        finalized, mentions = self._finalize()
        validate_content(finalized, self.max_length)
        author = self.identity.require_user()

        draft = SubmittedDraft(finalized_content=finalized, mentions=mentions,
                               author=author, raw_content=self._content)
        logger.debug(f"초안 제출 ({self.kind.value}): 멘션 {len(mentions)}건")
        return draft

    def reset(self) -> None:
        """저장이 끝난 뒤 호출하여 입력과 추천 상태를 비웁니다."""
        self._content = ""
        self._query = None
        self._suggestions = Suggestions()
