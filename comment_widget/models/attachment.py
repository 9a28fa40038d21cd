# comment_widget/models/attachment.py
from dataclasses import dataclass

@dataclass(frozen=True)
class Attachment:
    """댓글/답글 제출 시 함께 업로드할 파일."""
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"
