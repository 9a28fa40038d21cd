# comment_widget/schemas/user_schema.py
from marshmallow import Schema, fields, post_load, EXCLUDE

from comment_widget.models.user import User

class UserDocumentSchema(Schema):
    """'Users' 컬렉션 문서를 User 데이터클래스로 역직렬화하는 스키마"""
    class Meta:
        unknown = EXCLUDE

    id = fields.Str(required=True)
    uid = fields.Str(allow_none=True, load_default=None)
    display_name = fields.Str(data_key='displayName', allow_none=True, load_default="")
    email = fields.Str(allow_none=True, load_default="")

    @post_load
    def make_user(self, data, **kwargs):
        # 문서 ID 가 곧 uid 입니다. 이름이 없는 계정도 목록에는 남겨 둡니다.
        return User(
            id=data['id'] or data['uid'],
            display_name=data['display_name'] or "",
            email=data['email'] or "",
        )
