# comment_widget/models/comment.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from comment_widget.models.reaction import ReactionSet
from comment_widget.models.reply import Reply

@dataclass
class Comment:
    """
    Firestore 'comments' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    - mentions 는 작성 시점에 text 에서 한 번만 추출되며 이후 다시 계산하지 않습니다.
    - created_at 은 서버가 부여합니다.
    """
    id: str
    text: str  # 리치 텍스트 마크업
    author_id: str
    author_name: str
    created_at: Optional[datetime] = None
    mentions: List[str] = field(default_factory=list)  # 멘션된 사용자의 displayName
    file_url: Optional[str] = None
    author_photo: Optional[str] = None
    parent_id: str = ""  # 빈 문자열이면 최상위 댓글
    reactions: ReactionSet = field(default_factory=ReactionSet)
    replies: Optional[List[Reply]] = None  # 답글 스레드를 열었을 때만 채워집니다.
