# comment_widget/widget/test_reply_thread.py
"""
답글 스레드 테스트

사용법: python -m pytest comment_widget/widget/test_reply_thread.py -v
"""
import pytest

from comment_widget.core.errors import AuthRequiredError, ValidationError
from comment_widget.models.user import SignedInUser
from comment_widget.widget.reply_thread import ReplyThread
from conftest import BASE_TIME

ANNA = SignedInUser(uid="u1", display_name="Anna")


def seed_reply(store, doc_id, comment_id, body, minutes):
    store.seed('Reply', doc_id, {
        "body": body,
        "fileUrl": "",
        "mentions": [],
        "author": "Users/u3",
        "commentId": f"comments/{comment_id}",
        "createdAt": BASE_TIME.replace(minute=minutes),
    })


@pytest.mark.asyncio
async def test_fetch_filters_by_comment_reference(seeded_store):
    seed_reply(seeded_store, "r1", "c01", "first", 1)
    seed_reply(seeded_store, "r2", "c02", "other comment", 2)
    seed_reply(seeded_store, "r3", "c01", "second", 3)

    replies = await ReplyThread(seeded_store, "c01").fetch()

    assert [r.id for r in replies] == ["r1", "r3"]
    assert replies[0].comment_ref == "comments/c01"
    assert replies[0].file_url is None


@pytest.mark.asyncio
async def test_append_empty_body_fails_without_write(seeded_store):
    thread = ReplyThread(seeded_store, "c01")
    with pytest.raises(ValidationError):
        await thread.append("", [], author=ANNA)
    assert seeded_store.writes == []


@pytest.mark.asyncio
async def test_append_too_long_body_fails(seeded_store):
    thread = ReplyThread(seeded_store, "c01")
    with pytest.raises(ValidationError):
        await thread.append("x" * 251, [], author=ANNA)
    await thread.append("x" * 250, [], author=ANNA)


@pytest.mark.asyncio
async def test_append_requires_identity(seeded_store):
    thread = ReplyThread(seeded_store, "c01")
    with pytest.raises(AuthRequiredError):
        await thread.append("hi", [])


@pytest.mark.asyncio
async def test_appended_reply_is_at_tail_of_fetch(seeded_store):
    seed_reply(seeded_store, "r1", "c01", "earlier", 1)
    thread = ReplyThread(seeded_store, "c01")
    await thread.fetch()

    reply = await thread.append("hi", ["u2"], author=ANNA)

    assert thread.replies[-1] == reply
    assert reply.body == "hi"
    assert reply.mentions == ["u2"]
    assert reply.author_ref == "Users/u1"
    assert reply.created_at is not None

    refetched = await ReplyThread(seeded_store, "c01").fetch()
    assert refetched[-1].id == reply.id


@pytest.mark.asyncio
async def test_fetch_orders_by_created_at_not_document_id(seeded_store):
    seed_reply(seeded_store, "aa-later", "c01", "later", 5)
    seed_reply(seeded_store, "zz-earlier", "c01", "earlier", 1)

    replies = await ReplyThread(seeded_store, "c01").fetch()

    assert [r.id for r in replies] == ["zz-earlier", "aa-later"]


@pytest.mark.asyncio
async def test_appended_reply_is_at_tail_when_ids_sort_before_older_replies(seeded_store):
    # 새 문서 ID(new001)는 기존 답글 ID 보다 사전순으로 앞섭니다.
    seed_reply(seeded_store, "zz-earlier", "c01", "earlier", 0)
    thread = ReplyThread(seeded_store, "c01")

    reply = await thread.append("hi", [], author=ANNA)
    refetched = await ReplyThread(seeded_store, "c01").fetch()

    assert [r.id for r in refetched] == ["zz-earlier", reply.id]


@pytest.mark.asyncio
async def test_fetch_skips_malformed_replies(seeded_store):
    seed_reply(seeded_store, "r1", "c01", "fine", 1)
    seed_reply(seeded_store, "r2", "c01", None, 2)
    seed_reply(seeded_store, "r3", "c01", "also fine", 3)

    replies = await ReplyThread(seeded_store, "c01").fetch()

    assert [r.id for r in replies] == ["r1", "r3"]
