# comment_widget/schemas/reply_schema.py
from marshmallow import Schema, fields, post_load, EXCLUDE

from comment_widget.models.reply import Reply
from comment_widget.schemas.document_loader import parse_created_at


class ReplyDocumentSchema(Schema):
    """
    'Reply' 컬렉션 문서 <-> Reply 데이터클래스 변환 스키마.
    author / commentId 는 "Users/<uid>", "comments/<id>" 형태의 참조 문자열입니다.
    """
    class Meta:
        unknown = EXCLUDE

    id = fields.Str(required=True, load_only=True)
    body = fields.Str(load_default="")
    file_url = fields.Str(data_key='fileUrl', allow_none=True, load_default=None)
    mentions = fields.List(fields.Str(), load_default=list)
    author_ref = fields.Str(data_key='author', load_default="")
    comment_ref = fields.Str(data_key='commentId', required=True)
    created_at = fields.Raw(data_key='createdAt', allow_none=True, load_default=None, load_only=True)

    @post_load
    def make_reply(self, data, **kwargs):
        return Reply(
            id=data['id'],
            body=data['body'],
            author_ref=data['author_ref'],
            comment_ref=data['comment_ref'],
            created_at=parse_created_at(data['created_at']),
            mentions=list(data['mentions']),
            file_url=data['file_url'] or None,
        )
