import pytest

from json_field_filter.cancellation import CancellationToken
from json_field_filter.collector import FieldMeta, collect_fields
from json_field_filter.errors import CancelledError, ParseError
from json_field_filter.tokenizer import tokenize_text


def collect(doc):
    return collect_fields(tokenize_text(doc))


def test_same_name_at_different_depths_is_one_entry():
    fields = collect('{"a":1,"b":{"a":2}}')
    assert fields == {
        "a": FieldMeta(is_complex=False, count=2),
        "b": FieldMeta(is_complex=True, count=1),
    }


def test_any_compound_occurrence_makes_field_complex():
    assert collect('{"x": 1, "y": {"x": [1]}}')["x"] == FieldMeta(True, 2)
    # a later scalar occurrence does not reset it
    assert collect('{"x": {}, "y": {"x": "s"}}')["x"] == FieldMeta(True, 2)


def test_occurrences_inside_arrays_are_counted():
    fields = collect('{"items": [{"id": 1, "tags": []}, {"id": 2}, {"id": null}]}')
    assert fields["items"] == FieldMeta(True, 1)
    assert fields["id"] == FieldMeta(False, 3)
    assert fields["tags"] == FieldMeta(True, 1)


def test_documents_without_objects_have_no_fields():
    assert collect('[1, "two", [3], null]') == {}
    assert collect('"just a string"') == {}


def test_empty_key_is_a_field():
    assert collect('{"": 1}') == {"": FieldMeta(False, 1)}


def test_malformed_input_propagates_parse_error():
    with pytest.raises(ParseError):
        collect('{"a":}')


def test_cancel_after_first_token_never_returns_partial_mapping():
    token = CancellationToken()
    doc = "[" + ",".join('{"k%d": %d}' % (i, i) for i in range(1000)) + "]"

    def cancelling_tokens():
        for t in tokenize_text(doc):
            yield t
            token.cancel()

    with pytest.raises(CancelledError):
        collect_fields(cancelling_tokens(), token)
