from __future__ import annotations
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping
from jsm_gateway.domain.mapping_tables import (
    FORM_CHOICES,
    FORM_TEXT,
    ISSUE_TYPE,
    KEYWORD,
    PRIORITY,
    RESOURCE,
    FormTables,
    MappingTables,
)


logger = logging.getLogger(__name__)

DEFAULT_MAPPING_TABLES_PATH = Path(__file__).resolve().parent.parent / "data" / "mapping_tables.yaml"

# categories the field mapper falls back on
REQUIRED_DEFAULTS = (PRIORITY, ISSUE_TYPE, RESOURCE, KEYWORD)

class MappingTablesError(RuntimeError):
    """Raised when the mapping tables cannot be read, parsed, or are inconsistent."""

def load_mapping_tables(path: Path = DEFAULT_MAPPING_TABLES_PATH) -> MappingTables:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read mapping tables from {path}"
        logger.error("%s: %s", msg, exc)
        raise MappingTablesError(msg) from exc

    tables = parse_mapping_tables(text)
    logger.info(
        "Loaded mapping tables: %d request types, %d value tables, %d form templates",
        len(tables.request_type_fields),
        len(tables.value_tables),
        len(tables.form.templates),
    )
    return tables

def parse_mapping_tables(text: str) -> MappingTables:
    data = _parse_yaml(text)
    if not isinstance(data, dict):
        raise MappingTablesError("Mapping tables must be a YAML mapping")

    try:
        request_type_fields = {
            int(request_type): _frozen({str(k): str(v) for k, v in fields.items()})
            for request_type, fields in data["request_type_fields"].items()
        }
        value_tables = {
            str(category): _frozen(_with_identity_entries(table))
            for category, table in data["value_tables"].items()
        }
        defaults = {str(k): str(v) for k, v in data["defaults"].items()}

        form_raw = data["form"]
        form = FormTables(
            templates=_frozen({int(k): int(v) for k, v in form_raw["templates"].items()}),
            questions=_frozen({
                int(request_type): _frozen({str(k): str(v) for k, v in questions.items()})
                for request_type, questions in form_raw["questions"].items()
            }),
            kinds=_frozen({str(k): str(v) for k, v in form_raw["kinds"].items()}),
            choice_tables=_frozen({str(k): str(v) for k, v in form_raw["choice_tables"].items()}),
            fixed_choices=_frozen({str(k): str(v) for k, v in (form_raw.get("fixed_choices") or {}).items()}),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        msg = "Unexpected mapping tables shape"
        logger.error("%s: %s", msg, exc)
        raise MappingTablesError(msg) from exc

    tables = MappingTables(
        request_type_fields=_frozen(request_type_fields),
        value_tables=_frozen(value_tables),
        defaults=_frozen(defaults),
        form=form,
    )
    _check_consistency(tables)
    return tables

def _parse_yaml(text: str) -> Any:
    try:
        import yaml
    except ImportError as exc:
        msg = "PyYAML is required to parse the mapping tables"
        logger.error(msg)
        raise MappingTablesError(msg) from exc

    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as exc:
        msg = "Failed to parse mapping tables YAML"
        logger.error(msg)
        raise MappingTablesError(msg) from exc

def _with_identity_entries(table: Mapping[Any, Any]) -> dict[str, str]:
    """Lower-case the labels and make every choice id resolve to itself."""
    result = {str(label).strip().lower(): str(choice_id) for label, choice_id in table.items()}
    for choice_id in list(result.values()):
        result.setdefault(choice_id, choice_id)
    return result

def _check_consistency(tables: MappingTables) -> None:
    problems: list[str] = []

    for category in REQUIRED_DEFAULTS:
        if category not in tables.defaults:
            problems.append(f"no default for {category!r}")
        if category not in tables.value_tables:
            problems.append(f"no value table {category!r}")

    form = tables.form
    for request_type, questions in form.questions.items():
        for field_name, question_id in questions.items():
            kind = form.kinds.get(question_id)
            if kind not in (FORM_TEXT, FORM_CHOICES):
                problems.append(
                    f"form question {question_id} ({field_name}, request type {request_type}) "
                    f"has unknown kind {kind!r}"
                )
            elif kind == FORM_CHOICES and question_id not in form.choice_tables \
                    and question_id not in form.fixed_choices:
                problems.append(f"choice question {question_id} has no choice table")

    for question_id, table in form.choice_tables.items():
        if table not in tables.value_tables:
            problems.append(f"form question {question_id} refers to unknown table {table!r}")

    if problems:
        msg = "Inconsistent mapping tables: " + "; ".join(problems)
        logger.error(msg)
        raise MappingTablesError(msg)

def _frozen(mapping: Mapping[Any, Any]) -> Mapping[Any, Any]:
    return MappingProxyType(dict(mapping))
