# comment_widget/schemas/comment_schema.py
from marshmallow import Schema, fields, post_load, EXCLUDE, ValidationError as SchemaValidationError

from comment_widget.models.comment import Comment
from comment_widget.models.reaction import ReactionSet
from comment_widget.schemas.document_loader import parse_created_at


class CommentDocumentSchema(Schema):
    """
    'comments' 컬렉션 문서 <-> Comment 데이터클래스 변환 스키마.
    - load: Firestore 문서(dict, 'id' 포함) -> Comment
    - dump: Comment -> Firestore 문서 필드 (camelCase)
    문서에 남아 있는 예전 필드(예: 임베디드 replies 배열)는 무시합니다.
    """
    class Meta:
        unknown = EXCLUDE

    id = fields.Str(required=True, load_only=True)
    text = fields.Str(load_default="")
    file_url = fields.Str(data_key='fileUrl', allow_none=True, load_default=None)
    mentions = fields.List(fields.Str(), load_default=list)
    author_id = fields.Str(data_key='userId', load_default="")
    author_name = fields.Str(data_key='username', allow_none=True, load_default="")
    author_photo = fields.Str(data_key='userPhoto', allow_none=True, load_default=None)
    parent_id = fields.Str(data_key='parentId', load_default="")
    # Firestore 타임스탬프는 datetime 서브클래스이므로 Raw 로 받고 post_load 에서 정규화합니다.
    created_at = fields.Raw(data_key='createdAt', allow_none=True, load_default=None, load_only=True)
    reactions = fields.Method('dump_reactions', deserialize='load_reactions', allow_none=True, load_default=None)

    def dump_reactions(self, obj):
        return obj.reactions.to_dict()

    def load_reactions(self, value):
        try:
            return ReactionSet.from_mapping(value)
        except (TypeError, ValueError, AttributeError) as e:
            raise SchemaValidationError(f"reactions 값이 올바르지 않습니다: {value!r}") from e

    @post_load
    def make_comment(self, data, **kwargs):
        return Comment(
            id=data['id'],
            text=data['text'],
            author_id=data['author_id'],
            author_name=data['author_name'] or "",
            created_at=parse_created_at(data['created_at']),
            mentions=list(data['mentions']),
            # 첨부파일이 없으면 원본 위젯은 빈 문자열을 저장합니다.
            file_url=data['file_url'] or None,
            author_photo=data['author_photo'] or None,
            parent_id=data['parent_id'] or "",
            reactions=data['reactions'] or ReactionSet(),
        )
