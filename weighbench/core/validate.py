# weighbench/core/validate.py
from __future__ import annotations
from typing import Dict, Any, List, Optional
from jsonschema import Draft202012Validator, exceptions
from pydantic import ValidationError
import json
import yaml
from pathlib import Path
from dataclasses import dataclass

from .models import BenchmarkPlan

DEFAULT_SCHEMA_PATH = Path(__file__).resolve().parent.parent / "schema" / "benchmark-plan-v1.json"


def _location(error: exceptions.ValidationError) -> str:
    return " -> ".join(str(p) for p in error.path) if error.path else "root"


class PlanValidator:
    def __init__(self, schema_path: str | Path = DEFAULT_SCHEMA_PATH):
        try:
            self.schema_path = Path(schema_path)
            self.schema = json.loads(self.schema_path.read_text(encoding="utf-8"))
            self.validator = Draft202012Validator(self.schema)
        except json.JSONDecodeError as e:
            raise ValueError(f"Schema file parsing error: {e}")
        except FileNotFoundError:
            raise FileNotFoundError(f"Schema file not found: {schema_path}")

    def validate(self, plan: Dict[str, Any]) -> None:
        try:
            self.validator.validate(plan)
        except exceptions.ValidationError as e:
            message = f"Validation failed (location: {_location(e)}): {e.message}"
            raise exceptions.ValidationError(
                message,
                validator=e.validator,
                validator_value=e.validator_value,
                instance=e.instance,
                schema_path=e.schema_path,
                schema=e.schema,
                cause=e.cause,
            )

    def is_valid(self, plan: Dict[str, Any]) -> bool:
        return self.validator.is_valid(plan)

    def iter_errors(self, plan: Dict[str, Any]) -> List[str]:
        errors = []
        for error in self.validator.iter_errors(plan):
            errors.append(f"Validation error (location: {_location(error)}): {error.message}")
        return errors


@dataclass
class ValidationResult:
    valid: bool
    error: Optional[str] = None


def validate_plan(plan: Dict[str, Any], schema: Dict[str, Any] | str | Path | None = None) -> ValidationResult:
    if isinstance(schema, dict):
        validator = Draft202012Validator(schema)
        errors = [
            f"Validation error (location: {_location(error)}): {error.message}"
            for error in validator.iter_errors(plan)
        ]
    else:
        errors = PlanValidator(schema or DEFAULT_SCHEMA_PATH).iter_errors(plan)
    if not errors:
        return ValidationResult(valid=True)
    return ValidationResult(valid=False, error="; ".join(errors))


def read_plan_file(path: str | Path) -> Any:
    """Parse a plan file: YAML for .yaml/.yml, JSON otherwise."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        return yaml.safe_load(text)
    return json.loads(text)


def load_plan(path: str | Path, schema_path: str | Path = DEFAULT_SCHEMA_PATH) -> BenchmarkPlan:
    """Read, schema-check and parse a benchmark plan.

    Raises:
        ValueError: the file does not hold a valid plan
    """
    try:
        raw = read_plan_file(path)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValueError(f"Could not parse plan file {path}: {e}")
    if not isinstance(raw, dict):
        raise ValueError(f"Plan file {path} must contain a mapping at the top level")

    result = validate_plan(raw, schema_path)
    if not result.valid:
        raise ValueError(f"Plan validation failed: {result.error}")
    try:
        return BenchmarkPlan.model_validate(raw)
    except ValidationError as e:
        raise ValueError(f"Plan validation failed: {e}")
