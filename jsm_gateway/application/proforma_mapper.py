from __future__ import annotations
import logging
from typing import Any, Mapping
from jsm_gateway.domain.mapping_tables import FORM_CHOICES, FORM_TEXT, MappingTables
from jsm_gateway.shared.normalization import split_choice_tokens


logger = logging.getLogger(__name__)

class ProformaMapper:
    """Build ProForma form answers (question id -> text or choice ids) for a request type."""

    def __init__(self, tables: MappingTables) -> None:
        self._tables = tables
        self._form = tables.form

    def map_proforma_values(
        self,
        request_type_id: int,
        input_values: Mapping[str, Any],
    ) -> dict[str, Any] | None:
        """Return form answers, or None when the request type has no questions or
            no field produced an answer. None means the form section is omitted."""

        question_mapping = self._form.questions.get(request_type_id)
        if question_mapping is None:
            return None

        answers: dict[str, Any] = {}
        for field_name, question_id in question_mapping.items():
            value = input_values.get(field_name)
            if value is None or value == "":
                continue

            kind = self._form.kinds.get(question_id)
            if kind == FORM_TEXT:
                answers[question_id] = {"text": str(value)}
            elif kind == FORM_CHOICES:
                choices = [
                    choice_id
                    for choice_id in (
                        self.map_proforma_choice(question_id, token)
                        for token in split_choice_tokens(value)
                    )
                    if choice_id
                ]
                if choices:
                    answers[question_id] = {"choices": choices}
                else:
                    logger.warning(
                        "No known choices for form question %s (field %s): %r",
                        question_id,
                        field_name,
                        value,
                    )

        if not answers:
            return None

        logger.info(
            "Mapped %d ProForma answer(s) for request type %s",
            len(answers),
            request_type_id,
        )
        return answers

    def map_proforma_choice(self, question_id: str, choice_value: str) -> str | None:
        fixed = self._form.fixed_choices.get(question_id)
        if fixed is not None:
            return fixed

        table = self._form.choice_tables.get(question_id)
        if table is None:
            # unknown question: pass the caller's value through
            return choice_value

        return self._tables.lookup(table, choice_value.strip().lower())
