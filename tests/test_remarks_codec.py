from roservice.shared.remarks import (
    decode_remarks,
    encode_remarks,
    format_parts_summary,
    match_field,
    parse_parts_summary,
)


def test_encode_appends_new_field_to_existing_remarks():
    assert encode_remarks({"Phone": "555"}, existing="Name: Bob") == "Name: Bob, Phone: 555"


def test_encode_overwrites_existing_key_in_place():
    existing = "Name: Bob, Phone: 111, Address: Lake View"
    assert encode_remarks({"phone": "222"}, existing=existing) == "Name: Bob, Phone: 222, Address: Lake View"


def test_encode_matches_keys_case_insensitively_and_keeps_original_key():
    assert encode_remarks({"name": "Alice"}, existing="name: Bob") == "name: Alice"


def test_encode_keeps_unknown_keys_and_skips_none():
    result = encode_remarks({"name": "Asha", "phone": None}, existing="Brand: Kent, Model: Grand")
    assert result == "Brand: Kent, Model: Grand, Name: Asha"


def test_encode_from_scratch_uses_display_keys():
    result = encode_remarks({"name": "Asha", "phone": "9876543210", "address": "12 MG Road", "problem": "Leak"})
    assert result == "Name: Asha, Phone: 9876543210, Address: 12 MG Road, Problem: Leak"


def test_decode_matches_keys_by_substring():
    fields = decode_remarks("Customer Name: Asha, Mobile No: 9876543210, Home Address: 12 MG Road, Issue: No water")
    assert fields == {
        "name": "Asha",
        "phone": "9876543210",
        "address": "12 MG Road",
        "problem": "No water",
    }


def test_decode_customer_alias_and_ignores_unknown_keys():
    fields = decode_remarks("Customer: Asha, Phone: 9876543210, DateTime: 2025-01-15T10:00:00, Service: Repair")
    assert fields == {"name": "Asha", "phone": "9876543210"}


def test_decode_keeps_commas_inside_a_value():
    fields = decode_remarks("Name: Asha, Address: 12 MG Road, Pune, Phone: 9876543210")
    assert fields["address"] == "12 MG Road, Pune"
    assert fields["phone"] == "9876543210"


def test_decode_later_duplicate_wins():
    assert decode_remarks("Phone: 111, Alt Phone: 222")["phone"] == "222"


def test_decode_empty_and_free_text():
    assert decode_remarks(None) == {}
    assert decode_remarks("") == {}
    assert decode_remarks("call before coming") == {}


def test_phone_beats_name_when_both_tokens_present():
    assert match_field("Phone Name") == "phone"
    assert match_field("Brand") is None


def test_encode_then_decode_recovers_fields():
    fields = {"name": "Asha", "phone": "9876543210", "address": "Flat 4, Green Park", "problem": "Low pressure"}
    assert decode_remarks(encode_remarks(fields)) == fields


def test_parts_summary_format_and_parse():
    summary = format_parts_summary([("Sediment Filter", 2), ("Membrane", 1)])
    assert summary == "Sediment Filter x2, Membrane x1"
    assert parse_parts_summary(summary) == [("Sediment Filter", 2), ("Membrane", 1)]


def test_parse_summary_uses_last_quantity_marker_and_skips_garbage():
    assert parse_parts_summary("Filter x Large x3, broken entry, Pump xten") == [("Filter x Large", 3)]
    assert parse_parts_summary("") == []
