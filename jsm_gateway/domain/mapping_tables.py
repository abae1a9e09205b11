from __future__ import annotations
from dataclasses import dataclass
from collections.abc import Mapping


PRIORITY = "priority"
ISSUE_TYPE = "issue_type"
RESOURCE = "resource"
KEYWORD = "keyword"
IDENTITY_PROVIDER = "identity_provider"
BROWSER = "browser"
YES_NO = "yes_no"

FORM_TEXT = "text"
FORM_CHOICES = "choices"


@dataclass(frozen=True)
class FormTables:
    templates: Mapping[int, int]
    questions: Mapping[int, Mapping[str, str]]
    kinds: Mapping[str, str]
    choice_tables: Mapping[str, str]
    fixed_choices: Mapping[str, str]


@dataclass(frozen=True)
class MappingTables:
    """Read-only lookup data translating caller labels into JSM field and choice ids.

        ``request_type_fields`` maps request type -> input field name -> JSM field id.
        ``value_tables`` maps a category (priority, resource, ...) -> lower-case label -> choice id.
        ``defaults`` holds the fallback choice id per category.
        """

    request_type_fields: Mapping[int, Mapping[str, str]]
    value_tables: Mapping[str, Mapping[str, str]]
    defaults: Mapping[str, str]
    form: FormTables

    def fields_for(self, request_type_id: int) -> Mapping[str, str] | None:
        return self.request_type_fields.get(request_type_id)

    def lookup(self, category: str, label: str) -> str | None:
        return self.value_tables.get(category, {}).get(label)

    def default(self, category: str) -> str:
        return self.defaults[category]
