"""Unit tests for ObjectRecord."""

import json
import uuid

import pytest

from manta.sharkspotter.core.exceptions import RecordParseError, ValidationError
from manta.sharkspotter.models import ObjectRecord, StorageLocation

OWNER = "930896af-bf8c-48d4-885c-6573a94b1853"
OBJECT = "5d8e4a1c-1f7b-4c21-9d0e-2a4b6c8d0e1f"


def value_doc(**overrides):
    doc = {
        "owner": OWNER,
        "objectId": OBJECT,
        "key": f"/{OWNER}/stor/photos/cat.jpg",
        "contentLength": 1024,
        "sharks": [
            {"datacenter": "us-east-1", "manta_storage_id": "1.stor.us-east.example.com"},
            {"datacenter": "us-east-2", "manta_storage_id": "3.stor.us-east.example.com"},
        ],
    }
    doc.update(overrides)
    return doc


class TestObjectRecord:
    """Test decoding of value documents."""

    def test_from_json_text(self):
        """A JSON value document decodes into typed fields."""
        record = ObjectRecord.from_value(json.dumps(value_doc()))

        assert record.owner_id == uuid.UUID(OWNER)
        assert record.object_id == uuid.UUID(OBJECT)
        assert record.locations == ("1.stor.us-east.example.com", "3.stor.us-east.example.com")
        assert not record.is_part_record

    def test_from_mapping(self):
        """An already-decoded mapping is accepted."""
        record = ObjectRecord.from_value(value_doc())
        assert record.object_id == uuid.UUID(OBJECT)

    def test_populate_by_field_name(self):
        """Fields can be given by their Python names."""
        record = ObjectRecord(
            owner_id=OWNER,
            object_id=OBJECT,
            sharks=[StorageLocation(manta_storage_id="1.stor.us-east.example.com")],
        )
        assert record.locations == ("1.stor.us-east.example.com",)

    def test_record_is_immutable(self):
        """Records are frozen."""
        record = ObjectRecord.from_value(value_doc())
        with pytest.raises(Exception):
            record.key = "/other"  # type: ignore[misc]

    def test_part_record(self):
        """Keys under /<uuid>/uploads/ are multipart parts."""
        record = ObjectRecord.from_value(value_doc(key=f"/{OWNER}/uploads/ab/{OBJECT}/0"))
        assert record.is_part_record

    def test_uploads_not_at_second_level(self):
        """Only the owner-level uploads directory marks a part."""
        record = ObjectRecord.from_value(value_doc(key=f"/{OWNER}/stor/uploads/file"))
        assert not record.is_part_record

    def test_empty_sharks(self):
        """An object with no copies has no locations."""
        record = ObjectRecord.from_value(value_doc(sharks=[]))
        assert record.locations == ()

    @pytest.mark.parametrize(
        ("overrides", "field"),
        [
            ({"owner": "not-a-uuid"}, "owner"),
            ({"objectId": None}, "objectId"),
            ({"sharks": "1.stor"}, "sharks"),
            ({"sharks": [{"datacenter": "us-east-1"}]}, "sharks"),
        ],
    )
    def test_malformed_document(self, overrides, field):
        """Bad required fields raise RecordParseError naming the field."""
        with pytest.raises(RecordParseError, match=field) as exc_info:
            ObjectRecord.from_value(value_doc(**overrides), row_id=42)

        assert exc_info.value.row_id == 42
        assert isinstance(exc_info.value, ValidationError)

    def test_missing_owner(self):
        """A document without an owner is malformed."""
        doc = value_doc()
        del doc["owner"]
        with pytest.raises(RecordParseError, match="owner"):
            ObjectRecord.from_value(doc)

    def test_invalid_json(self):
        """Text that is not JSON is malformed."""
        with pytest.raises(RecordParseError, match="malformed"):
            ObjectRecord.from_value("{not json")


class TestFromRow:
    """Test decoding raw table rows."""

    def test_from_row(self):
        """The _value column is decoded."""
        row = {"_id": 7, "type": "object", "_value": json.dumps(value_doc())}
        assert ObjectRecord.from_row(row).owner_id == uuid.UUID(OWNER)

    def test_row_without_value(self):
        """A row without _value cannot be decoded."""
        with pytest.raises(RecordParseError, match="row 9") as exc_info:
            ObjectRecord.from_row({"_idx": 9, "type": "object"})
        assert exc_info.value.row_id == 9

    def test_row_id_is_reported(self):
        """Parse errors carry the row id from either column."""
        row = {"_id": "12", "_value": json.dumps(value_doc(owner="x"))}
        with pytest.raises(RecordParseError) as exc_info:
            ObjectRecord.from_row(row)
        assert exc_info.value.row_id == 12
