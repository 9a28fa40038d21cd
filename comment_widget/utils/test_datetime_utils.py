# comment_widget/utils/test_datetime_utils.py
"""
시간 유틸리티 테스트

사용법: python -m pytest comment_widget/utils/test_datetime_utils.py -v
"""

import pytest
from datetime import datetime, date, timezone, timedelta
from comment_widget.utils.datetime_utils import DateTimeUtils


def test_parse_iso_datetime():
    """ISO 포맷 파싱 테스트"""
    test_cases = [
        "2024-01-15T10:30:00Z",
        "2024-01-15T10:30:00+09:00",
        "2024-01-15T10:30:00.123456Z",
        "2024-01-15T10:30:00"
    ]

    for iso_string in test_cases:
        dt = DateTimeUtils.parse_iso_datetime(iso_string)
        assert isinstance(dt, datetime)
        assert dt.tzinfo == timezone.utc  # UTC로 정규화되어야 함


def test_parse_iso_datetime_rejects_garbage():
    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("not-a-date")
    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("")


def test_to_iso_string_uses_z_suffix():
    dt = datetime(2024, 1, 15, 19, 30, tzinfo=timezone(timedelta(hours=9)))
    assert DateTimeUtils.to_iso_string(dt) == "2024-01-15T10:30:00Z"


def test_for_firestore():
    """Firestore 변환 테스트"""
    test_data = {
        'day': date(2020, 1, 15),
        'createdAt': datetime(2024, 1, 15, 10, 30),
        'nested': [{'createdAt': datetime(2024, 1, 1)}]
    }

    converted = DateTimeUtils.for_firestore(test_data)

    assert converted['day'] == datetime(2020, 1, 15, tzinfo=timezone.utc)
    assert converted['createdAt'].tzinfo == timezone.utc
    assert converted['nested'][0]['createdAt'].tzinfo == timezone.utc


def test_from_firestore_normalizes_to_utc():
    """Firestore 읽기 변환 테스트"""
    naive = datetime(2024, 1, 15, 10, 30)
    assert DateTimeUtils.from_firestore(naive) == naive.replace(tzinfo=timezone.utc)

    kst = datetime(2024, 1, 15, 19, 30, tzinfo=timezone(timedelta(hours=9)))
    assert DateTimeUtils.from_firestore(kst) == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)

    assert DateTimeUtils.from_firestore("2024-01-15T10:30:00Z") == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    assert DateTimeUtils.from_firestore(None) is None


def test_from_firestore_rejects_unknown_types():
    with pytest.raises(ValueError):
        DateTimeUtils.from_firestore(12345)
