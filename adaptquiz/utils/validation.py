"""Schema validation utilities for question pools and answer files."""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union


class ValidationError(Exception):
    """Base exception for validation errors."""
    pass


class SchemaValidationError(ValidationError):
    """Raised when data doesn't match expected schema."""
    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or []


@dataclass
class FieldSpec:
    """Specification for a data field."""
    name: str
    type: Any
    required: bool = True
    nullable: bool = False
    min_length: Optional[int] = None


@dataclass
class DatasetSchema:
    """Schema definition for dataset validation."""
    name: str
    fields: List[FieldSpec]
    allow_extra_fields: bool = True
    min_records: Optional[int] = None


QUESTION_POOL_SCHEMA = DatasetSchema(
    name="question_pool",
    fields=[
        FieldSpec(name="id", type=(str, int), required=True, min_length=1),
        FieldSpec(name="question_type", type=str, required=False, nullable=True),
        FieldSpec(name="prompt", type=str, required=False, nullable=True),
        # Any shape is accepted; Question.from_record degrades unknown ones.
        FieldSpec(name="options", type=object, required=False, nullable=True),
        FieldSpec(name="correct_answer", type=object, required=False, nullable=True),
        FieldSpec(name="difficulty", type=object, required=False, nullable=True),
        FieldSpec(name="explanation", type=str, required=False, nullable=True),
    ],
    allow_extra_fields=True,
    min_records=1,
)

ANSWER_FILE_SCHEMA = DatasetSchema(
    name="answers",
    fields=[
        FieldSpec(name="question_id", type=(str, int), required=True),
        FieldSpec(name="answer", type=dict, required=False, nullable=True),
    ],
    allow_extra_fields=True,
    min_records=1,
)


class SchemaValidator:
    """Validator for dataset schemas."""

    def __init__(self, schema: DatasetSchema):
        self.schema = schema

    def validate_record(self, record: Dict[str, Any]) -> List[str]:
        """Validate a single record against schema.

        Args:
            record: Record to validate

        Returns:
            List of validation errors (empty if valid)
        """
        if not isinstance(record, dict):
            return [f"Expected an object, got {type(record).__name__}"]

        errors = []
        for field_spec in self.schema.fields:
            if field_spec.required and field_spec.name not in record:
                errors.append(f"Missing required field: {field_spec.name}")
                continue

            if field_spec.name not in record:
                continue

            value = record[field_spec.name]
            if value is None:
                if not field_spec.nullable:
                    errors.append(f"Field {field_spec.name} cannot be null")
                continue

            expected_types = field_spec.type if isinstance(field_spec.type, tuple) else (field_spec.type,)
            if not any(isinstance(value, t) for t in expected_types):
                errors.append(
                    f"Field {field_spec.name} has wrong type: expected {field_spec.type}, "
                    f"got {type(value).__name__}"
                )
                continue

            if field_spec.min_length and isinstance(value, (str, list)) and len(value) < field_spec.min_length:
                errors.append(f"Field {field_spec.name} too short: minimum {field_spec.min_length}")

        if not self.schema.allow_extra_fields:
            expected_fields = {f.name for f in self.schema.fields}
            extra_fields = set(record.keys()) - expected_fields
            if extra_fields:
                errors.append(f"Unexpected fields: {', '.join(sorted(extra_fields))}")

        return errors

    def validate_dataset(self, records: List[Dict[str, Any]]) -> None:
        """Validate entire dataset.

        Raises:
            SchemaValidationError: If validation fails
        """
        all_errors = []

        if self.schema.min_records and len(records) < self.schema.min_records:
            all_errors.append(f"Dataset has too few records: minimum {self.schema.min_records}")

        for i, record in enumerate(records):
            record_errors = self.validate_record(record)
            if record_errors:
                all_errors.extend([f"Record {i}: {e}" for e in record_errors])

        if all_errors:
            raise SchemaValidationError(
                f"{self.schema.name} validation failed with {len(all_errors)} errors",
                errors=all_errors
            )

    def validate_file(self, filepath: Union[str, Path]) -> None:
        """Validate a JSONL dataset file.

        Raises:
            SchemaValidationError: If validation fails or a line is not JSON
            FileNotFoundError: If file doesn't exist
        """
        filepath = Path(filepath)
        if not filepath.exists():
            raise FileNotFoundError(f"Dataset file not found: {filepath}")

        records = []
        with open(filepath, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                if not line.strip():
                    continue
                try:
                    records.append(json.loads(line))
                except json.JSONDecodeError as e:
                    raise SchemaValidationError(f"Invalid JSON at line {line_num}: {e}")

        self.validate_dataset(records)

