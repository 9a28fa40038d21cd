# comment_widget/schemas/document_loader.py
"""
원격 문서를 스키마로 읽어 들이는 공용 함수.

- 목록 조회(load_documents): 형식이 잘못된 문서는 로그를 남기고 건너뜁니다.
- 단건 조회(load_document): 형식이 잘못되면 InvalidDocumentError 를 발생시킵니다.
"""
import logging
from typing import Any, Dict, List, Optional

from marshmallow import Schema, ValidationError as SchemaValidationError

from comment_widget.core.errors import InvalidDocumentError
from comment_widget.utils.datetime_utils import DateTimeUtils

logger = logging.getLogger(__name__)


def parse_created_at(value: Any):
    """createdAt 값을 UTC datetime 으로 변환합니다. 해석할 수 없으면 스키마 검증 오류."""
    try:
        return DateTimeUtils.from_firestore(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise SchemaValidationError(f"createdAt 값을 해석할 수 없습니다: {value!r}", field_name='createdAt') from e


def load_documents(schema: Schema, documents: List[Dict[str, Any]], kind: str) -> List[Any]:
    loaded = []
    for document in documents:
        try:
            loaded.append(schema.load(document))
        except SchemaValidationError as e:
            logger.warning(f"형식이 잘못된 {kind} 문서를 건너뜁니다 (doc_id: {document.get('id')}): {e.messages}")
    return loaded


def load_document(schema: Schema, document: Optional[Dict[str, Any]], kind: str) -> Any:
    try:
        return schema.load(document or {})
    except SchemaValidationError as e:
        doc_id = (document or {}).get('id')
        logger.error(f"{kind} 문서 형식 오류 (doc_id: {doc_id}): {e.messages}")
        raise InvalidDocumentError(f"저장된 {kind} 데이터를 읽을 수 없습니다.", details={'doc_id': doc_id}) from e
