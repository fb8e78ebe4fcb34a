import pytest
from sqlalchemy import select

from lostfound.exceptions import ConversationNotFoundError, ValidationError
from lostfound.models import Message
from lostfound.services.conversation_service import ConversationService
from lostfound.services.message_service import MessageService

@pytest.fixture
async def conversation(test_db, alice, bob, lost_phone):
    """Bob reaching out to Alice about her lost phone"""
    return await ConversationService(test_db).get_or_create(lost_phone.id, bob.id, alice.id)

async def read_flags(db, conversation_id: int) -> dict:
    stmt = select(Message).where(
        Message.conversation_id == conversation_id
    ).execution_options(populate_existing=True)
    result = await db.execute(stmt)
    return {message.content: message.is_read for message in result.scalars().all()}

@pytest.mark.asyncio
async def test_append_bumps_last_message_at(test_db, alice, bob, conversation, notifier):
    service = MessageService(test_db, notifier)
    opened_at = conversation.last_message_at

    first = await service.append(conversation.id, bob.id, "I found a black iPhone in Hamra")
    assert first.is_read is False
    assert first.sender_id == bob.id
    assert conversation.last_message_at == first.created_at
    assert conversation.last_message_at > opened_at

    second = await service.append(conversation.id, alice.id, "That's mine!")
    assert second.created_at > first.created_at
    assert conversation.last_message_at == second.created_at

    assert notifier.sent == [(first.id, alice.id), (second.id, bob.id)]

@pytest.mark.asyncio
async def test_rapid_messages_never_share_a_timestamp(test_db, bob, conversation):
    service = MessageService(test_db)

    sent = [await service.append(conversation.id, bob.id, f"message {index}") for index in range(10)]

    stamps = [message.created_at for message in sent]
    assert stamps == sorted(stamps)
    assert len(set(stamps)) == len(stamps)

@pytest.mark.parametrize("content", ["", "   ", "\n\t"])
@pytest.mark.asyncio
async def test_empty_content_is_rejected(test_db, bob, conversation, content):
    conversation_id, sender_id = conversation.id, bob.id

    with pytest.raises(ValidationError):
        await MessageService(test_db).append(conversation_id, sender_id, content)

    assert await read_flags(test_db, conversation_id) == {}

@pytest.mark.asyncio
async def test_append_to_missing_conversation(test_db, bob):
    with pytest.raises(ConversationNotFoundError):
        await MessageService(test_db).append(4242, bob.id, "hello?")

@pytest.mark.asyncio
async def test_notifier_failure_does_not_lose_the_message(test_db, alice, bob, conversation):
    class BrokenNotifier:
        async def message_created(self, message, recipient_id):
            raise RuntimeError("push provider down")

    message = await MessageService(test_db, BrokenNotifier()).append(conversation.id, bob.id, "Still there?")

    assert message.id is not None
    assert await read_flags(test_db, conversation.id) == {"Still there?": False}

@pytest.mark.asyncio
async def test_reading_marks_only_incoming_messages(test_db, alice, bob, conversation):
    """Alice reading flips Bob's messages; her own stay unread"""
    service = MessageService(test_db)
    await service.append(conversation.id, bob.id, "Found it near AUB")
    await service.append(conversation.id, alice.id, "Can we meet?")
    await service.append(conversation.id, bob.id, "Sure, tomorrow")

    page = await service.list_and_mark_read(conversation.id, alice.id)

    assert [message.content for message in page] == [
        "Sure, tomorrow",
        "Can we meet?",
        "Found it near AUB",
    ]
    assert {message.content: message.is_read for message in page} == {
        "Sure, tomorrow": True,
        "Can we meet?": False,
        "Found it near AUB": True,
    }

    page = await service.list_and_mark_read(conversation.id, bob.id)
    assert all(message.is_read for message in page)

@pytest.mark.asyncio
async def test_marking_read_covers_messages_outside_the_page(test_db, alice, bob, conversation):
    service = MessageService(test_db)
    for index in range(5):
        await service.append(conversation.id, bob.id, f"update {index}")

    page = await service.list_and_mark_read(conversation.id, alice.id, limit=2)

    assert [message.content for message in page] == ["update 4", "update 3"]
    flags = await read_flags(test_db, conversation.id)
    assert all(flags.values())

@pytest.mark.asyncio
async def test_message_pages_do_not_overlap(test_db, bob, alice, conversation):
    service = MessageService(test_db)
    for index in range(4):
        await service.append(conversation.id, bob.id, f"note {index}")

    first = await service.list_and_mark_read(conversation.id, alice.id, limit=2, offset=0)
    second = await service.list_and_mark_read(conversation.id, alice.id, limit=2, offset=2)

    assert [message.content for message in first] == ["note 3", "note 2"]
    assert [message.content for message in second] == ["note 1", "note 0"]

@pytest.mark.asyncio
async def test_mark_read_returns_number_flipped(test_db, alice, bob, conversation):
    service = MessageService(test_db)
    await service.append(conversation.id, bob.id, "one")
    await service.append(conversation.id, bob.id, "two")
    await service.append(conversation.id, alice.id, "three")

    assert await service.mark_read(conversation.id, alice.id) == 2
    assert await service.mark_read(conversation.id, alice.id) == 0
    assert await service.mark_read(conversation.id, bob.id) == 1

    assert await read_flags(test_db, conversation.id) == {"one": True, "two": True, "three": True}

@pytest.mark.asyncio
async def test_list_conversations_reflects_reads(test_db, alice, bob, conversation):
    messages = MessageService(test_db)
    await messages.append(conversation.id, bob.id, "ping")
    await messages.append(conversation.id, bob.id, "ping again")

    conversations = ConversationService(test_db)
    before = await conversations.list_conversations(alice.id)
    assert before[0].unread_count == 2

    await messages.mark_read(conversation.id, alice.id)

    after = await conversations.list_conversations(alice.id)
    assert after[0].unread_count == 0
