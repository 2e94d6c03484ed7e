"""
Identifier helper tests.
"""

import pytest
from bson import ObjectId

from quill.shared.core.exceptions import MalformedIdentifierError
from quill.shared.utils.identifiers import (
    decode_document,
    is_valid_identifier,
    require_identifier,
    to_object_id,
    unique_in_order,
)


class TestIdentifiers:
    def test_valid_and_invalid(self):
        assert is_valid_identifier(str(ObjectId()))
        assert is_valid_identifier(ObjectId())
        assert not is_valid_identifier("abc")
        assert not is_valid_identifier("z" * 24)
        assert not is_valid_identifier(12)
        assert not is_valid_identifier(None)

    def test_require_identifier_canonicalizes(self):
        value = str(ObjectId())

        assert require_identifier(value.upper()) == value

    def test_require_identifier_raises_not_found_kind(self):
        with pytest.raises(MalformedIdentifierError) as exc_info:
            require_identifier("nope", "Post")

        assert exc_info.value.status_code == 404
        assert exc_info.value.error_code == "MALFORMED_IDENTIFIER"

    def test_to_object_id(self):
        oid = ObjectId()

        assert to_object_id(str(oid)) == oid
        assert to_object_id(oid) is oid

    def test_unique_in_order(self):
        assert unique_in_order(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]

    def test_decode_document(self):
        oid, ref = ObjectId(), ObjectId()

        decoded = decode_document({"_id": oid, "author_id": ref, "categories": [ref], "title": "t"})

        assert decoded == {"id": str(oid), "author_id": str(ref), "categories": [str(ref)], "title": "t"}
        assert decode_document(None) is None
