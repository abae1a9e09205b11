import logging
import pytest
from jsm_gateway.application.errors import UnmappedValueError
from jsm_gateway.application.field_mapper import FieldMapper
from jsm_gateway.infrastructure.mapping_tables_loader import load_mapping_tables


TABLES = load_mapping_tables()

def _mapper(strict: bool = False) -> FieldMapper:
    return FieldMapper(TABLES, strict=strict)

def test_unknown_request_type_maps_to_empty_dict() -> None:
    mapper = _mapper()

    assert mapper.map_field_values(999, {"summary": "S"}) == {}
    assert mapper.map_field_values(0, {}) == {}

def test_general_support_keeps_summary_and_description_untouched() -> None:
    mapper = _mapper()

    result = mapper.map_field_values(17, {"summary": "S", "description": "D", "email": "e@x.com"})

    assert result == {"summary": "S", "description": "D"}
    assert "priority" not in result

def test_fields_are_emitted_under_jsm_field_ids() -> None:
    mapper = _mapper()

    result = mapper.map_field_values(
        17,
        {
            "summary": "S",
            "description": "D",
            "accessId": "jdoe",
            "name": "Jane Doe",
            "issueType": "Allocation Question",
            "priority": "High",
            "unknownField": "ignored",
        },
    )

    assert result == {
        "summary": "S",
        "description": "D",
        "customfield_10103": "jdoe",
        "customfield_10108": "Jane Doe",
        "customfield_10111": {"id": "10213"},
        "priority": {"id": "2"},
    }

def test_empty_and_none_values_are_skipped() -> None:
    mapper = _mapper()

    result = mapper.map_field_values(17, {"summary": "", "description": None, "priority": ""})

    assert result == {}

@pytest.mark.parametrize(
    ("label", "expected"),
    [
        ("lowest", "4"),
        ("low", "5"),
        ("medium", "3"),
        ("high", "2"),
        ("highest", "1"),
        ("HIGHEST", "1"),
        ("1", "1"),
        ("5", "5"),
    ],
)
def test_priority_labels_and_ids_resolve_and_are_idempotent(label: str, expected: str) -> None:
    mapper = _mapper()

    first = mapper.map_priority_value(label)
    again = mapper.map_priority_value(first["id"])

    assert first == {"id": expected}
    assert again == first

def test_unknown_priority_falls_back_to_medium() -> None:
    mapper = _mapper()

    assert mapper.map_priority_value("Unknown") == {"id": "3"}
    assert mapper.map_priority_value(None) == {"id": "3"}

def test_issue_type_defaults_to_user_support_question() -> None:
    mapper = _mapper()

    assert mapper.map_issue_type_value("no such question") == {"id": "10214"}
    assert mapper.map_issue_type_value("") == {"id": "10214"}
    assert mapper.map_issue_type_value("10221") == {"id": "10221"}

def test_access_resource_maps_for_provider_login(caplog: pytest.LogCaptureFixture) -> None:
    mapper = _mapper()

    result = mapper.map_field_values(31, {"accessResource": "Bridges-2", "description": "D"})
    assert result == {"customfield_10110": {"id": "10199"}, "description": "D"}

    with caplog.at_level(logging.WARNING):
        fallback = mapper.map_access_resource_value("Summit")

    assert fallback == {"id": "10202"}
    assert "Summit" in caplog.text

def test_strict_mode_rejects_unmapped_values() -> None:
    mapper = _mapper(strict=True)

    with pytest.raises(UnmappedValueError):
        mapper.map_field_values(17, {"priority": "urgent"})

    # falsy values still fall back in strict mode
    assert mapper.map_priority_value(0) == {"id": "3"}

def test_keywords_accept_list_or_comma_separated_string() -> None:
    mapper = _mapper()

    assert mapper.map_keywords_value("Python, slurm") == [{"id": "10450"}, {"id": "10482"}]
    assert mapper.map_keywords_value(["GPU", "not-a-keyword"]) == [{"id": "10363"}]

def test_keywords_fall_back_when_nothing_maps() -> None:
    mapper = _mapper()

    assert mapper.map_keywords_value("not-a-keyword, another") == [{"id": "0"}]
    assert mapper.map_keywords_value(None) == [{"id": "0"}]
    assert mapper.map_keywords_value([]) == [{"id": "0"}]

def test_suggested_keyword() -> None:
    mapper = _mapper()

    assert mapper.map_suggested_keyword_value("Globus") == {"id": "10361"}
    assert mapper.map_suggested_keyword_value("I don't see a relevant keyword") == {"id": "0"}
    assert mapper.map_suggested_keyword_value("I don’t see a relevant keyword") == {"id": "0"}
    assert mapper.map_suggested_keyword_value("quantum-annealing") == {"id": "0"}
