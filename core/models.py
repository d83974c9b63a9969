"""
Domain Models — Typed entities produced by the EntityExtractor.

The Record360 API hands back schema-less JSON: trigger criteria are arbitrary
maps, flags are inconsistently typed, and workflow modules carry no type tag.
This module defines the small set of dataclasses that the rest of the pipeline
works with, so that shape probing happens once at ingestion instead of in every
consumer.

Criteria conditions are a tagged variant:

    ScalarCondition     {"check_in": false}          -> value=False
    OperatorCondition   {"year": {"$gte": 2020}}     -> operator="$gte", operand=2020
    OrCondition         {"$or": [{"check_in": true}]} -> clauses=[("check_in", True)]

Pipeline context:
    Built by EntityExtractor (Step 3) and consumed by CriteriaInterpreter
    (Step 4), WorkflowModuleResolver (Step 5) and RowProjector.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union


OR_KEY = "$or"


def display_string(value: Any) -> str:
    """Render a JSON value the way the Record360 admin pages display it.

    Booleans and null use their JSON spelling, integral floats drop the
    trailing ".0", lists are joined with "," (null elements become empty) and
    maps are rendered as compact JSON.

    Examples:
        display_string(True)        -> "true"
        display_string(None)        -> "null"
        display_string(3.0)         -> "3"
        display_string(["a", "b"])  -> "a,b"
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return ",".join("" if item is None else display_string(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


@dataclass
class ScalarCondition:
    value: Any


@dataclass
class OperatorCondition:
    operator: str
    operand: Any


@dataclass
class OrCondition:
    clauses: List[Tuple[str, Any]] = field(default_factory=list)


Condition = Union[ScalarCondition, OperatorCondition, OrCondition]


@dataclass
class Criterion:
    """One key of a trigger's criteria map with its decoded condition."""
    key: str
    condition: Condition


def to_condition(key: str, raw: Any) -> Condition:
    """Decode one criteria value into its tagged variant.

    "$or" with a list becomes an OrCondition; elements that are not
    non-empty objects are dropped. A non-empty map becomes an
    OperatorCondition using its first entry. Everything else, including an
    empty map, is kept as a ScalarCondition.
    """
    if key == OR_KEY and isinstance(raw, list):
        clauses = []
        for element in raw:
            if isinstance(element, dict) and element:
                sub_key = next(iter(element))
                clauses.append((sub_key, element[sub_key]))
        return OrCondition(clauses)

    if isinstance(raw, dict) and raw:
        operator = next(iter(raw))
        return OperatorCondition(operator, raw[operator])

    return ScalarCondition(raw)


def to_criteria(raw: Mapping[str, Any]) -> List[Criterion]:
    """Decode a raw criteria map, preserving key order."""
    return [Criterion(str(key), to_condition(str(key), value)) for key, value in raw.items()]


@dataclass
class Trigger:
    """A company-level email trigger.

    Attributes:
        index: 1-based position in the company's trigger list.
        criteria: Decoded criteria, in the order they appear in the payload.
        recipients: Trimmed, non-empty addresses from email.to.
        subject: email.subject, or None when absent/empty.
        error: Set when the trigger could not be decoded at all.
    """
    index: int
    criteria: List[Criterion] = field(default_factory=list)
    recipients: List[str] = field(default_factory=list)
    subject: Optional[str] = None
    error: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None


@dataclass
class Location:
    """A company location and its raw workflow template modules.

    `modules` is None when the location has no workflow body or template,
    which is different from a template with an empty module list.
    `demo` is a tri-state: True, False, or None when the flag is missing or
    not recognisable.
    """
    id: str
    name: str
    demo: Optional[bool] = None
    active: bool = False
    modules: Optional[List[Dict[str, Any]]] = None

    @property
    def is_reportable(self) -> bool:
        return self.active and self.demo is not True


@dataclass
class User:
    id: str
    name: str
    email: str

    @property
    def label(self) -> str:
        return f"{self.name}—{self.email}"
