"""
Tests for the wire and storage schemas.
"""

import json

import pytest
from pydantic import ValidationError

from examsheet.evaluations.schemas import (
    MAX_MISTAKE_COUNT,
    EvaluationHistoryItem,
    MistakeEntry,
    MistakeList,
    PagedResult,
    SubmitEvaluationRequest,
    to_camel,
)


def test_to_camel():
    assert to_camel("page_size") == "pageSize"
    assert to_camel("total_points") == "totalPoints"
    assert to_camel("id") == "id"


def test_request_accepts_camel_case():
    request = SubmitEvaluationRequest.parse_obj(
        {"mistakes": [{"itemId": 3, "count": 2}], "maxPoints": 21}
    )
    assert request.max_points == 21
    assert request.mistakes == [MistakeEntry(item_id=3, count=2)]


def test_request_defaults():
    request = SubmitEvaluationRequest.parse_obj({})
    assert request.mistakes == []
    assert request.max_points is None


@pytest.mark.parametrize("entry", [
    {"itemId": 0, "count": 1},
    {"itemId": 4, "count": -2},
    {"count": 1},
    {"itemId": 4, "count": 2.9},
    {"itemId": 4, "count": True},
    {"itemId": 4, "count": "2"},
    {"itemId": 1.5, "count": 1},
    {"itemId": 4, "count": MAX_MISTAKE_COUNT + 1},
])
def test_invalid_entries(entry):
    with pytest.raises(ValidationError):
        MistakeEntry.parse_obj(entry)


class TestMistakeListCodec:

    def test_encodes_the_wire_layout_in_order(self):
        raw = MistakeList.encode([MistakeEntry(item_id=7, count=1), MistakeEntry(item_id=2, count=4)])
        assert json.loads(raw) == [{"itemId": 7, "count": 1}, {"itemId": 2, "count": 4}]

    def test_decode(self):
        entries = MistakeList.decode('[{"itemId": 2, "count": 4}]')
        assert entries == [MistakeEntry(item_id=2, count=4)]

    @pytest.mark.parametrize("raw", [None, "", "[]"])
    def test_decode_empty(self, raw):
        assert MistakeList.decode(raw) == []

    def test_decode_rejects_malformed_rows(self):
        with pytest.raises(ValidationError):
            MistakeList.decode('[{"itemId": -1, "count": 4}]')


def test_paged_result_serializes_with_camel_case():
    page = PagedResult[EvaluationHistoryItem](page=1, page_size=2, total=0, items=[])
    assert json.loads(page.json(by_alias=True)) == {"page": 1, "pageSize": 2, "total": 0, "items": []}
