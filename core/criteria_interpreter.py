"""
Criteria Interpreter — Turns a trigger's criteria into human-readable lines.

Each criteria key becomes one line. A handful of keys get special treatment:

  location_id   "Location: Depot"            (or "Location: ID 7" when unknown)
  user_id       "User: Jo Smith—jo@x.com"    (or "User: ID 3 (INACTIVE USER ACCOUNT)")
  check_in      "Inspection Type: Checkout" / "Inspection Type: Return" / "Update"
  $or           "Inspection Type: Checkout, Return"
  notations.*   the "notations." prefix is dropped from the displayed key

Every other key renders as "{key}: {value}", where a single-operator map such
as {"$gte": 2020} renders its operand.

Note: a null check_in renders "Update" without the "Inspection Type:" prefix.
Downstream spreadsheet consumers match on that literal, so it is kept as-is.

Pipeline context:
    Used in Step 4 of the orchestrator pipeline, through RowProjector.
"""

from typing import Any, List, Mapping, Sequence, Union

from .models import (
    Condition,
    Criterion,
    OperatorCondition,
    OrCondition,
    OR_KEY,
    ScalarCondition,
    display_string,
    to_criteria,
)

NOTATIONS_PREFIX = "notations."
INSPECTION_TYPE_PREFIX = "Inspection Type: "
UNHANDLED = "Unhandled"


def inspection_type(value: Any) -> str:
    """Map the check_in tri-state to its inspection type label.

    False -> "Checkout", True -> "Return", None -> "Update", else "Unhandled".
    Only real booleans count; 0 and 1 are "Unhandled".
    """
    if value is False:
        return "Checkout"
    if value is True:
        return "Return"
    if value is None:
        return "Update"
    return UNHANDLED


def _lookup_value(condition: Condition) -> Any:
    if isinstance(condition, OperatorCondition):
        return condition.operand
    if isinstance(condition, ScalarCondition):
        return condition.value
    return None


class CriteriaInterpreter:
    """Renders decoded criteria against a company's lookup tables.

    Attributes:
        location_index: location id -> location name.
        user_index: user id -> "name—email" label.
        debug: If True, prints unresolved references.
    """

    def __init__(
        self,
        location_index: Mapping[str, str] = None,
        user_index: Mapping[str, str] = None,
        debug: bool = False,
    ):
        self.location_index = dict(location_index or {})
        self.user_index = dict(user_index or {})
        self.debug = debug

    def interpret(self, criteria: Union[Mapping[str, Any], Sequence[Criterion]]) -> List[str]:
        """Render every criterion as one line, in order.

        Args:
            criteria: A raw criteria map or a list of decoded Criterion objects.

        Returns:
            One description per criteria key.
        """
        if isinstance(criteria, Mapping):
            criteria = to_criteria(criteria)
        return [self.describe(criterion) for criterion in criteria]

    def describe(self, criterion: Criterion) -> str:
        key = criterion.key
        condition = criterion.condition

        if key == "location_id":
            return self._describe_location(_lookup_value(condition))
        if key == "user_id":
            return self._describe_user(_lookup_value(condition))
        if key == "check_in":
            return self._describe_check_in(condition)
        if key == OR_KEY and isinstance(condition, OrCondition):
            labels = [
                inspection_type(value)
                for sub_key, value in condition.clauses
                if sub_key == "check_in"
            ]
            return INSPECTION_TYPE_PREFIX + ", ".join(labels)

        display_key = key[len(NOTATIONS_PREFIX):] if key.startswith(NOTATIONS_PREFIX) else key
        return f"{display_key}: {display_string(_lookup_value(condition))}"

    def _describe_location(self, value: Any) -> str:
        location_id = display_string(value)
        name = self.location_index.get(location_id)
        if name:
            return f"Location: {name}"
        return f"Location: ID {location_id}"

    def _describe_user(self, value: Any) -> str:
        user_id = display_string(value)
        label = self.user_index.get(user_id)
        if label:
            return f"User: {label}"
        if self.debug:
            print(f"  Warning: user ID {user_id} not found in company users")
        return f"User: ID {user_id} (INACTIVE USER ACCOUNT)"

    def _describe_check_in(self, condition: Condition) -> str:
        if not isinstance(condition, ScalarCondition):
            return INSPECTION_TYPE_PREFIX + UNHANDLED
        label = inspection_type(condition.value)
        if condition.value is None:
            return label
        return INSPECTION_TYPE_PREFIX + label


def interpret(
    criteria: Union[Mapping[str, Any], Sequence[Criterion]],
    location_index: Mapping[str, str],
    user_index: Mapping[str, str],
) -> List[str]:
    """Render criteria against the given lookup tables. See CriteriaInterpreter."""
    return CriteriaInterpreter(location_index, user_index).interpret(criteria)

