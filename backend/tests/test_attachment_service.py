import os

import pytest

from content_attachments.config import settings
from content_attachments.exceptions import AttachmentTooLarge, InvalidVersion, MissingSectionOrFile, RecordNotFound
from content_attachments.models.attachable import Attachable, VersionedAttachable, VersionedAttachableVersion
from content_attachments.models.attachment import Attachment, AttachmentVersion
from content_attachments.services import attachment_service, record_version_service
from content_attachments.services.attachment_binding import AttachmentBinding
from content_attachments.utils import storage
from tests.conftest import file_upload


def _create(db, section, path="test.jpg", content=b"v1"):
    attachment = attachment_service.create_attachment(
        db,
        section=section,
        path=path,
        upload=file_upload(content=content),
    )
    db.commit()
    return attachment


def test_create_attachment_requires_section_and_upload(db, seed_section):
    with pytest.raises(MissingSectionOrFile):
        attachment_service.create_attachment(db, section=None, path="a.txt", upload=file_upload())
    with pytest.raises(MissingSectionOrFile):
        attachment_service.create_attachment(db, section=seed_section, path="a.txt", upload=None)
    assert db.query(Attachment).count() == 0


def test_create_attachment_writes_first_version(db, seed_section, upload_dir):
    attachment = _create(db, seed_section)

    assert attachment.version == 1
    assert attachment.file_path == "/test.jpg"
    assert attachment.file_size == 2
    assert [row.version for row in attachment_service.list_versions(db, attachment)] == [1]
    location = attachment_service.full_file_location(attachment)
    assert location.startswith(os.path.abspath(str(upload_dir)))
    assert attachment_service.read_content(attachment) == b"v1"


def test_path_only_update_reuses_content_location(db, seed_section):
    attachment = _create(db, seed_section)
    first_location = attachment.file_location

    attachment_service.update_attachment(db, attachment, path="renamed.jpg")
    db.commit()

    assert attachment.version == 2
    assert attachment.file_location == first_location
    v2 = attachment_service.version_at(db, attachment, 2)
    assert v2.file_path == "/renamed.jpg"
    assert v2.file_location == first_location


def test_content_update_writes_new_location(db, seed_section):
    attachment = _create(db, seed_section)

    attachment_service.update_attachment(db, attachment, upload=file_upload(content=b"v2"))
    db.commit()

    v1 = attachment_service.version_at(db, attachment, 1)
    v2 = attachment_service.version_at(db, attachment, 2)
    assert v1.file_location != v2.file_location
    assert attachment_service.read_content(v1) == b"v1"
    assert attachment_service.read_content(v2) == b"v2"


def test_update_without_changes_is_noop(db, seed_section):
    attachment = _create(db, seed_section)

    attachment_service.update_attachment(db, attachment)
    db.commit()

    assert attachment.version == 1
    assert db.query(AttachmentVersion).count() == 1


def test_version_at_out_of_range(db, seed_section):
    attachment = _create(db, seed_section)

    with pytest.raises(InvalidVersion):
        attachment_service.version_at(db, attachment, 0)
    with pytest.raises(InvalidVersion):
        attachment_service.version_at(db, attachment, 2)


def test_revert_attachment_appends_version(db, seed_section):
    attachment = _create(db, seed_section)
    attachment_service.update_attachment(db, attachment, path="b.jpg", upload=file_upload(content=b"v2"))
    db.commit()

    attachment_service.revert_attachment(db, attachment, 1)
    db.commit()

    assert attachment.version == 3
    assert attachment.file_path == "/test.jpg"
    assert attachment_service.read_content(attachment) == b"v1"
    assert db.query(AttachmentVersion).count() == 3


def test_revert_to_current_version_is_noop(db, seed_section):
    attachment = _create(db, seed_section)

    attachment_service.revert_attachment(db, attachment, 1)

    assert attachment.version == 1


def test_get_missing_attachment(db):
    with pytest.raises(RecordNotFound):
        attachment_service.get_attachment(db, 123)


def test_too_large_upload_is_rejected_without_rows(db, seed_section, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE", 4)
    binding = AttachmentBinding(
        db,
        Attachable(name="Too Large"),
        attachment_section=seed_section,
        attachment_file=file_upload(content=b"0123456789"),
    )

    with pytest.raises(AttachmentTooLarge):
        binding.save()

    assert db.query(Attachable).count() == 0
    assert db.query(Attachment).count() == 0
    assert db.query(AttachmentVersion).count() == 0


def test_discard_written_files(upload_dir):
    location = storage.write_content(b"orphan")
    assert os.path.exists(storage.full_path(location))

    attachment_service.discard_written_files([location, "2000/01/01/missing"])

    assert not os.path.exists(storage.full_path(location))


def test_failed_commit_discards_written_content(db, seed_section, monkeypatch):
    written = []
    original_write = storage.write_content

    def _tracking_write(data, now=None):
        location = original_write(data, now)
        written.append(location)
        return location

    def _failing_commit():
        raise RuntimeError("commit failed")

    monkeypatch.setattr(storage, "write_content", _tracking_write)
    binding = AttachmentBinding(
        db,
        Attachable(name="Commit Fails"),
        attachment_section=seed_section,
        attachment_file=file_upload(),
    )
    monkeypatch.setattr(db, "commit", _failing_commit)

    with pytest.raises(RuntimeError):
        binding.save()

    assert len(written) == 1
    assert not os.path.exists(storage.full_path(written[0]))
    assert db.query(Attachable).count() == 0
    assert db.query(Attachment).count() == 0


def _fail_next_commit(db, monkeypatch):
    original_commit = db.commit
    calls = []

    def _commit_once_failing():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("commit failed")
        return original_commit()

    monkeypatch.setattr(db, "commit", _commit_once_failing)


def test_retry_after_failed_commit_creates_first_version(db, seed_section, monkeypatch):
    record = Attachable(name="Retry")
    binding = AttachmentBinding(
        db,
        record,
        attachment_section=seed_section,
        attachment_file=file_upload(content=b"retry"),
    )
    _fail_next_commit(db, monkeypatch)

    with pytest.raises(RuntimeError):
        binding.save()

    assert record.id is None
    assert record.attachment is None
    assert record.attachment_id is None
    assert record.attachment_version is None

    binding.save()

    assert record.attachment.version == 1
    assert record.attachment_version == 1
    assert [row.version for row in attachment_service.list_versions(db, record.attachment)] == [1]
    assert attachment_service.read_content(record.attachment) == b"retry"
    assert db.query(Attachable).count() == 1
    assert db.query(Attachment).count() == 1


def test_retry_after_failed_update_commit_adds_one_version(db, seed_section, monkeypatch):
    record = Attachable(name="Retry Update")
    binding = AttachmentBinding(db, record, attachment_section=seed_section, attachment_file=file_upload(content=b"v1"))
    binding.save()
    _fail_next_commit(db, monkeypatch)

    binding.attachment_file = file_upload(content=b"v2")
    with pytest.raises(RuntimeError):
        binding.save()

    assert record.attachment.version == 1
    assert record.attachment_version == 1

    binding.save()

    assert record.attachment.version == 2
    assert record.attachment_version == 2
    assert [row.version for row in attachment_service.list_versions(db, record.attachment)] == [2, 1]
    assert attachment_service.read_content(record.attachment) == b"v2"


def test_retry_after_failed_commit_of_versioned_record(db, seed_section, monkeypatch):
    record = VersionedAttachable(name="Retry Versioned")
    binding = AttachmentBinding(db, record, attachment_section=seed_section, attachment_file=file_upload())
    _fail_next_commit(db, monkeypatch)

    with pytest.raises(RuntimeError):
        binding.save()

    assert record.id is None
    assert record.version is None

    binding.save()

    assert record.version == 1
    assert record.attachment.version == 1
    assert [row.version for row in record_version_service.list_record_versions(db, record)] == [1]
    assert db.query(VersionedAttachableVersion).count() == 1
