"""Tests for the message repository: folders, paging, send and trash."""
from __future__ import annotations

import pytest

from tasksaver.errors import NotFoundError, ValidationError
from tasksaver.messages import (
    create_message,
    delete_message,
    folder_filters,
    get_message,
    list_messages,
    send_message,
    update_message,
)

USER = "u1"
SENDER = "alice@example.com"


def _draft(store, **fields):
    return create_message(store, USER, SENDER, dict({"to": ["bob@example.com"]}, **fields))


class TestFolders:
    def test_folder_membership(self, store):
        draft = _draft(store, subject="draft")
        sent = send_message(store, USER, SENDER, {"to": ["bob@example.com"], "subject": "sent"})
        starred = _draft(store, subject="starred", is_starred=True)
        archived = _draft(store, subject="archived", status="archived")
        trashed = _draft(store, subject="trashed")
        delete_message(store, USER, trashed.id)

        def ids(folder):
            return {m.id for m in list_messages(store, USER, folder=folder).messages}

        assert ids("inbox") == {draft.id, sent.id, starred.id}
        assert ids("sent") == {sent.id}
        assert ids("drafts") == {draft.id, starred.id}
        assert ids("starred") == {starred.id}
        assert ids("archived") == {archived.id}
        assert ids("trash") == {trashed.id}

    def test_folder_overrides_status(self):
        filters = folder_filters(USER, folder="sent", status="draft")
        assert [(f.field, f.value) for f in filters] == [("user_id", USER), ("status", "sent")]

    def test_unknown_folder(self):
        with pytest.raises(ValidationError):
            folder_filters(USER, folder="spam")

    def test_other_users_messages_hidden(self, store):
        _draft(store)
        assert list_messages(store, "u2").total == 0


class TestPaging:
    def test_pages(self, store):
        created = [_draft(store, subject=f"m{i}") for i in range(5)]
        first = list_messages(store, USER, limit=2, page=1)
        last = list_messages(store, USER, limit=2, page=3)
        assert first.total == 5
        assert first.pages == 3
        assert [m.id for m in first.messages] == [created[4].id, created[3].id]
        assert [m.id for m in last.messages] == [created[0].id]
        assert first.pagination() == {"page": 1, "limit": 2, "total": 5, "pages": 3}

    def test_invalid_paging(self, store):
        with pytest.raises(ValidationError):
            list_messages(store, USER, limit=0)


class TestLifecycle:
    def test_defaults(self, store):
        message = _draft(store)
        assert message.status == "draft"
        assert message.sender == SENDER
        assert message.thread_id.isdigit()
        assert message.is_read is False

    def test_get_marks_read_once(self, store):
        message = _draft(store)
        assert get_message(store, USER, message.id, mark_read=False).is_read is False
        assert get_message(store, USER, message.id).is_read is True
        assert get_message(store, USER, message.id, mark_read=False).is_read is True

    def test_send_existing_draft(self, store):
        draft = _draft(store, subject="Hi")
        sent = send_message(store, USER, SENDER, {"body": "Final text"}, draft.id)
        assert sent.id == draft.id
        assert sent.status == "sent"
        assert sent.body == "Final text"
        assert sent.sent_at is not None

    def test_send_unknown_draft(self, store):
        with pytest.raises(NotFoundError):
            send_message(store, USER, SENDER, {}, "missing")

    def test_update_validation(self, store):
        message = _draft(store)
        with pytest.raises(ValidationError):
            update_message(store, USER, message.id, {"priority": "urgent"})
        with pytest.raises(ValidationError, match="At least one recipient is required"):
            update_message(store, USER, message.id, {"to": []})

    def test_attachments(self, store):
        message = _draft(store, attachments=[{"filename": "a.pdf", "size": 10, "type": "application/pdf"}])
        stored = get_message(store, USER, message.id)
        assert stored.attachments[0].filename == "a.pdf"

    def test_delete_keeps_document(self, store):
        message = _draft(store)
        assert delete_message(store, USER, message.id).status == "deleted"
        assert get_message(store, USER, message.id) is not None
        assert delete_message(store, "u2", message.id) is None
