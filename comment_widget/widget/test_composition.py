# comment_widget/widget/test_composition.py
"""
작성 세션(멘션 추천, 제출 검증) 테스트

사용법: python -m pytest comment_widget/widget/test_composition.py -v
"""
import pytest

from comment_widget.core.errors import AuthRequiredError, ValidationError
from comment_widget.widget.composition import CompositionSession, DraftKind
from comment_widget.widget.mention_directory import MentionDirectory


@pytest.mark.asyncio
async def test_suggestions_follow_trailing_trigger(seeded_store, identity):
    directory = MentionDirectory(seeded_store)
    await directory.load()
    session = CompositionSession(directory, identity)

    state = session.on_edit("hello @an")
    assert [u.display_name for u in state.users] == ["Anna", "Banana"]
    assert state.visible is True

    state = session.on_edit("hello @an ")
    assert state.users == []
    assert state.visible is False
    assert session.query is None


@pytest.mark.asyncio
async def test_trigger_without_hits_is_hidden_but_open(seeded_store, identity):
    directory = MentionDirectory(seeded_store)
    await directory.load()
    session = CompositionSession(directory, identity)

    state = session.on_edit("hey @zzz")
    assert state.users == [] and state.visible is False
    # 트리거는 열려 있으므로 '트리거 없음' 과 내부적으로 구분됩니다.
    assert session.query == "zzz"


@pytest.mark.asyncio
async def test_bare_at_sign_lists_whole_directory(seeded_store, identity):
    directory = MentionDirectory(seeded_store)
    await directory.load()
    session = CompositionSession(directory, identity)

    state = session.on_edit("@")
    assert len(state.users) == 3


@pytest.mark.asyncio
async def test_select_then_submit_collects_display_names(seeded_store, identity):
    directory = MentionDirectory(seeded_store)
    await directory.load()
    await identity.sign_in("token-u1")
    session = CompositionSession(directory, identity)

    session.on_edit("hi @ba")
    content = session.select_suggestion(directory.get("u2"))
    assert 'data-name="Banana"' in content
    assert session.suggestions.visible is False

    session.on_edit(content + "and @bo")
    session.select_suggestion(directory.get("u3"))
    draft = session.submit()

    assert draft.mentions == ["Banana", "Bob"]
    assert draft.finalized_content == session.content
    assert draft.author.uid == "u1"


@pytest.mark.asyncio
async def test_reply_draft_uses_ids_and_plain_text(seeded_store, identity):
    directory = MentionDirectory(seeded_store)
    await directory.load()
    await identity.sign_in("token-u1")
    session = CompositionSession(directory, identity, kind=DraftKind.REPLY)

    session.on_edit("<p>thanks @bo")
    session.select_suggestion(directory.get("u3"))
    draft = session.submit()

    assert draft.mentions == ["u3"]
    assert draft.finalized_content == "thanks @Bob"


@pytest.mark.asyncio
async def test_submit_length_limits(seeded_store, identity):
    directory = MentionDirectory(seeded_store)
    await identity.sign_in("token-u1")
    session = CompositionSession(directory, identity)

    session.on_edit("x" * 251)
    with pytest.raises(ValidationError):
        session.submit()
    assert seeded_store.writes == [('set', 'Users', 'u1')]

    session.on_edit("x" * 250)
    assert session.submit().finalized_content == "x" * 250

    session.on_edit("")
    with pytest.raises(ValidationError):
        session.submit()


def test_submit_requires_identity(seeded_store, identity):
    session = CompositionSession(MentionDirectory(seeded_store), identity)
    session.on_edit("hello")
    with pytest.raises(AuthRequiredError):
        session.submit()
    # 실패해도 초안은 그대로 남습니다.
    assert session.content == "hello"
