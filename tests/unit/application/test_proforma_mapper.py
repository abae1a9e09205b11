from jsm_gateway.application.proforma_mapper import ProformaMapper
from jsm_gateway.infrastructure.mapping_tables_loader import load_mapping_tables


TABLES = load_mapping_tables()

def test_request_type_without_questions_returns_none() -> None:
    mapper = ProformaMapper(TABLES)

    assert mapper.map_proforma_values(26, {"summary": "S"}) is None
    assert mapper.map_proforma_values(999, {}) is None

def test_no_form_fields_returns_none_not_empty_dict() -> None:
    mapper = ProformaMapper(TABLES)

    assert mapper.map_proforma_values(17, {"summary": "S", "description": "D"}) is None
    assert mapper.map_proforma_values(17, {"keywords": "", "userIdAtResource": None}) is None

def test_general_support_answers() -> None:
    mapper = ProformaMapper(TABLES)

    answers = mapper.map_proforma_values(
        17,
        {
            "hasResourceProblem": "Yes",
            "userIdAtResource": "jdoe42",
            "resourceName": "Expanse",
            "keywords": ["Python", "SLURM", "bogus"],
            "noRelevantKeyword": "true",
            "suggestedKeyword": "quantum annealing",
        },
    )

    assert answers == {
        "1": {"choices": ["1"]},
        "5": {"text": "jdoe42"},
        "8": {"choices": ["10202"]},
        "9": {"choices": ["10450", "10482"]},
        "10": {"choices": ["1"]},
        "13": {"text": "quantum annealing"},
    }

def test_access_login_splits_comma_separated_choices() -> None:
    mapper = ProformaMapper(TABLES)

    answers = mapper.map_proforma_values(30, {"identityProvider": "GitHub", "browser": "Chrome, Firefox"})

    assert answers == {"16": {"choices": ["6"]}, "17": {"choices": ["4", "3"]}}

def test_question_with_only_unknown_choices_is_omitted() -> None:
    mapper = ProformaMapper(TABLES)

    assert mapper.map_proforma_values(30, {"browser": "Netscape"}) is None
    assert mapper.map_proforma_values(30, {"browser": "Netscape", "identityProvider": "ORCID"}) == {
        "16": {"choices": ["2"]},
    }

def test_text_answers_are_stringified() -> None:
    mapper = ProformaMapper(TABLES)

    assert mapper.map_proforma_values(31, {"userIdAtResource": 1234}) == {"5": {"text": "1234"}}

def test_map_proforma_choice() -> None:
    mapper = ProformaMapper(TABLES)

    assert mapper.map_proforma_choice("1", "No") == "2"
    assert mapper.map_proforma_choice("22", "safari") == "6"
    assert mapper.map_proforma_choice("21", "microsoft") == "5"
    assert mapper.map_proforma_choice("10", "anything") == "1"
    assert mapper.map_proforma_choice("8", "atlantis") is None
    # questions without a table pass the value through
    assert mapper.map_proforma_choice("99", "free text") == "free text"
