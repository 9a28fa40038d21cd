# comment_widget/models/user.py
from dataclasses import dataclass
from typing import Optional

@dataclass(frozen=True)
class User:
    """
    Firestore 'Users' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    멘션 후보 목록에 쓰이며 세션 동안 변경되지 않습니다.
    """
    id: str
    display_name: str
    email: str = ""


@dataclass(frozen=True)
class SignedInUser:
    """인증 제공자가 돌려주는 현재 로그인 사용자 정보."""
    uid: str
    display_name: str
    email: str = ""
    photo_url: Optional[str] = None
