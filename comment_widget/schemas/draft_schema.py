# comment_widget/schemas/draft_schema.py
from marshmallow import Schema, fields, validate
from marshmallow import ValidationError as SchemaValidationError

from comment_widget.core.errors import ValidationError


def make_draft_schema(max_length: int) -> Schema:
    """
    댓글/답글 제출 내용의 길이를 검사하는 스키마를 생성합니다.
    최대 길이는 설정(MAX_CONTENT_LENGTH)에서 주입됩니다.
    """
    return Schema.from_dict({
        "content": fields.Str(
            required=True,
            validate=validate.Length(min=1, max=max_length, error=f"댓글은 1~{max_length}자 사이여야 합니다.")
        )
    }, name="DraftSchema")()


def validate_content(content: str, max_length: int) -> str:
    """길이 검사를 통과한 내용을 그대로 반환하고, 실패하면 위젯 ValidationError 를 발생시킵니다."""
    try:
        return make_draft_schema(max_length).load({"content": content})["content"]
    except SchemaValidationError as err:
        messages = err.messages.get("content", []) if isinstance(err.messages, dict) else err.messages
        message = messages[0] if messages else "내용이 올바르지 않습니다."
        raise ValidationError(message, details=err.messages) from err
