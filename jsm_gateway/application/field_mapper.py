from __future__ import annotations
import logging
from typing import Any, Callable, Mapping
from jsm_gateway.application.errors import UnmappedValueError
from jsm_gateway.domain.mapping_tables import (
    ISSUE_TYPE,
    KEYWORD,
    PRIORITY,
    RESOURCE,
    MappingTables,
)
from jsm_gateway.shared.normalization import label_key, split_choice_tokens


logger = logging.getLogger(__name__)

NO_RELEVANT_KEYWORD = "i don't see a relevant keyword"

class FieldMapper:
    """Translate caller field names and labels into JSM request field values.

        Only fields listed for the request type are emitted; empty values are
        dropped. Priority, issue type and resource labels are resolved to their
        choice ids, falling back to the configured default unless ``strict``.
        """

    def __init__(self, tables: MappingTables, strict: bool = False) -> None:
        self._tables = tables
        self._strict = strict
        self._transforms: dict[str, Callable[[Any], Any]] = {
            "priority": self.map_priority_value,
            "issueType": self.map_issue_type_value,
            "accessResource": self.map_access_resource_value,
        }

    def map_field_values(self, request_type_id: int, input_values: Mapping[str, Any]) -> dict[str, Any]:
        field_mapping = self._tables.fields_for(request_type_id)
        if field_mapping is None:
            logger.warning("No field mapping found for request type %s", request_type_id)
            return {}

        mapped: dict[str, Any] = {}
        for field_name, target_id in field_mapping.items():
            if field_name not in input_values:
                continue

            value = input_values[field_name]
            # never send blanks to JSM
            if value is None or value == "":
                continue

            transform = self._transforms.get(field_name)
            mapped[target_id] = transform(value) if transform else value

        logger.info("Mapped %d field(s) for request type %s", len(mapped), request_type_id)
        return mapped

    def map_priority_value(self, priority: Any) -> dict[str, str]:
        return {"id": self._resolve(PRIORITY, priority, "priority")}

    def map_issue_type_value(self, issue_type: Any) -> dict[str, str]:
        return {"id": self._resolve(ISSUE_TYPE, issue_type, "issue type")}

    def map_access_resource_value(self, resource: Any) -> dict[str, str]:
        return {"id": self._resolve(RESOURCE, resource, "ACCESS resource")}

    def map_keywords_value(self, keywords: Any) -> list[dict[str, str]]:
        fallback = [{"id": self._tables.default(KEYWORD)}]
        if not keywords:
            return fallback

        mapped: list[dict[str, str]] = []
        for token in split_choice_tokens(keywords):
            keyword_id = self._tables.lookup(KEYWORD, token)
            if keyword_id is None:
                logger.warning("Unknown keyword %r, skipping", token)
                continue
            mapped.append({"id": keyword_id})

        return mapped or fallback

    def map_suggested_keyword_value(self, suggested_keyword: Any) -> dict[str, str]:
        default_id = self._tables.default(KEYWORD)
        key = label_key(suggested_keyword)
        # typographic apostrophes come from some browsers
        if key.replace("’", "'") == NO_RELEVANT_KEYWORD:
            return {"id": default_id}

        keyword_id = self._tables.lookup(KEYWORD, key)
        if keyword_id is None:
            logger.warning(
                "Unknown suggested keyword %r, defaulting to %r",
                suggested_keyword,
                NO_RELEVANT_KEYWORD,
            )
            return {"id": default_id}
        return {"id": keyword_id}

    def _resolve(self, category: str, value: Any, description: str) -> str:
        default_id = self._tables.default(category)
        if not value:
            return default_id

        choice_id = self._tables.lookup(category, label_key(value))
        if choice_id is not None:
            return choice_id

        if self._strict:
            raise UnmappedValueError(f"Unknown {description}: {value!r}")

        logger.warning("Unknown %s %r, defaulting to %s", description, value, default_id)
        return default_id
