# comment_widget/widget/mention_parser.py
"""
리치 텍스트 마크업에서 멘션을 다루는 규칙 모음.

두 종류의 추출 규칙은 의도적으로 분리되어 있습니다.
- 댓글: data-name 속성의 표시 이름을 수집
- 답글: <span ... data-id="..."> 의 사용자 ID 를 수집
두 규칙을 합치면 저장되는 mentions 값의 의미가 달라집니다.
"""
import html
import re
from typing import List, Optional

from bs4 import BeautifulSoup

from comment_widget.models.user import User

# 입력 끝에 있는 '@' + 단어 문자들
MENTION_TRIGGER_PATTERN = re.compile(r'@(\w*)$')
# 댓글 마크업의 멘션 토큰: data-name="표시 이름"
DISPLAY_NAME_MARKER_PATTERN = re.compile(r'data-name="([^"]+)"')
# 답글 마크업의 멘션 토큰: <span ... data-id="uid" ...>...</span>
USER_ID_MARKER_PATTERN = re.compile(r'<span.*?data-id="(\w+)".*?>.*?</span>', re.DOTALL)


def match_trigger(content: str) -> Optional[str]:
    """
    입력 끝에 멘션 트리거가 있으면 '@' 뒤의 검색어(빈 문자열 가능)를, 없으면 None 을 반환합니다.
    """
    match = MENTION_TRIGGER_PATTERN.search(content)
    return match.group(1) if match else None


def extract_from_rich_markup(markup: str) -> List[str]:
    """댓글 마크업에서 멘션된 표시 이름을 등장 순서대로, 중복을 포함해 추출합니다."""
    return [html.unescape(name) for name in DISPLAY_NAME_MARKER_PATTERN.findall(markup)]


def extract_user_ids(markup: str) -> List[str]:
    """답글 마크업에서 멘션된 사용자 ID 를 등장 순서대로, 중복을 포함해 추출합니다."""
    return USER_ID_MARKER_PATTERN.findall(markup)


def insert_display_name_token(content: str, user: User) -> str:
    """끝의 트리거 구간을 표시 이름을 담은 편집 불가 멘션 토큰으로 바꿉니다. (댓글용)"""
    name = html.escape(user.display_name, quote=True)
    token = f'<span contenteditable="false" data-name="{name}" class="mention">@{name}</span> '
    return MENTION_TRIGGER_PATTERN.sub(lambda _: token, content, count=1)


def insert_user_id_token(content: str, user: User) -> str:
    """끝의 트리거 구간을 사용자 ID 를 담은 편집 불가 멘션 토큰으로 바꿉니다. (답글용)"""
    name = html.escape(user.display_name, quote=True)
    uid = html.escape(user.id, quote=True)
    token = f'<span class="mention" contenteditable="false" data-id="{uid}" data-value="{name}">@{name}</span> '
    return MENTION_TRIGGER_PATTERN.sub(lambda _: token, content, count=1)


def to_plain_text(markup: str) -> str:
    """마크업을 제거한 평문을 돌려줍니다. 답글 본문 저장에 사용합니다."""
    return BeautifulSoup(markup, "html.parser").get_text().strip()
