# comment_widget/models/reaction.py
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class ReactionKind(Enum):
    """댓글에 남길 수 있는 반응 종류"""
    LIKE = "like"
    LOVE = "love"
    LAUGH = "laugh"
    ANGRY = "angry"


@dataclass(frozen=True)
class ReactionSet:
    """
    댓글 문서의 'reactions' 필드 구조. 네 개의 키는 항상 존재하며 0 이상입니다.
    """
    like: int = 0
    love: int = 0
    laugh: int = 0
    angry: int = 0

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "ReactionSet":
        """누락된 키는 0으로 채워서 생성합니다."""
        data = data or {}
        return cls(**{kind.value: int(data.get(kind.value) or 0) for kind in ReactionKind})

    def get(self, kind: ReactionKind) -> int:
        return getattr(self, kind.value)

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)
