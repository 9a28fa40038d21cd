# comment_widget/models/reply.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

@dataclass(frozen=True)
class Reply:
    """
    Firestore 'Reply' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    댓글과 달리 본문은 마크업이 제거된 평문이고, mentions 에는 사용자 ID 가 담깁니다.
    """
    id: str
    body: str
    author_ref: str   # "Users/<uid>"
    comment_ref: str  # "comments/<commentId>"
    created_at: Optional[datetime] = None
    mentions: List[str] = field(default_factory=list)
    file_url: Optional[str] = None
