"""
Entity Extractor — Parses the raw GraphQL company node into typed entities.

This module sits between the raw API response (Step 2) and the report builders
(Steps 4-5). It takes the nested GraphQL JSON and produces a flat, normalized
dict of entities that downstream modules can consume without knowing anything
about the GraphQL response shape.

The company node has this structure:
    {
      "id": "42",
      "name": "Acme Rentals",
      "triggers": [                    # JSON strings or already-parsed objects
        "{\"criteria\": {\"check_in\": false}, \"email\": {\"to\": \"a@x.com\"}}",
        {"criteria": {...}, "email": {...}}
      ],
      "locations": {
        "edges": [
          {"node": {"id": "7", "name": "Depot", "demo": "false", "active": true,
                    "workflow": {"body": {"template": {"modules": [...]}}}}}
        ]
      },
      "users": {"edges": [{"node": {"id": "3", "name": "Jo", "email": "jo@x.com"}}]}
    }

Output format (returned by extract()):
    {
      "company": {"id", "name"},
      "triggers": [Trigger, ...],
      "locations": [Location, ...],
      "users": [User, ...],
      "location_index": {location_id: location_name},
      "user_index": {user_id: "name—email"},
    }

Key behaviors:
  - Connections may be GraphQL {"edges": [{"node": ...}]} or plain lists.
  - A trigger that is not valid JSON (or not an object) becomes a Trigger with
    `error` set; the other triggers are unaffected.
  - The location "demo" and "active" flags arrive as booleans or as the strings
    "true"/"false"; normalize_flag() folds both into True/False/None.
  - A workflow body delivered as a JSON string is decoded; a body that cannot
    be decoded is treated as absent.

Pipeline context:
    Used in Step 3 of the orchestrator pipeline. Input comes from
    Record360Client.fetch_company() (Step 2). Output feeds into
    CriteriaInterpreter (Step 4) and WorkflowModuleResolver (Step 5).
"""

import json
from typing import Any, Dict, List, Optional

from .models import Location, Trigger, User, display_string, to_criteria

PARSE_ERROR_MESSAGE = "Error parsing trigger data."


def connection_nodes(connection: Any) -> List[Dict]:
    """Return the node dicts of a GraphQL connection or a plain list."""
    if isinstance(connection, dict):
        items = connection.get("edges") or []
    elif isinstance(connection, list):
        items = connection
    else:
        return []

    nodes = []
    for item in items:
        if isinstance(item, dict) and "node" in item:
            item = item["node"]
        if isinstance(item, dict):
            nodes.append(item)
    return nodes


def normalize_flag(value: Any) -> Optional[bool]:
    """Fold an inconsistently typed flag (demo, active) into True / False / None.

    Examples:
        normalize_flag(True)     -> True
        normalize_flag("true")   -> True
        normalize_flag("False")  -> False
        normalize_flag(0)        -> False
        normalize_flag("maybe")  -> None
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
        return None
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    return None


def split_addresses(value: Any) -> List[str]:
    """Split a comma-separated address field into trimmed, non-empty entries.

    Duplicates are kept; order is preserved. Lists are flattened.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        addresses = []
        for item in value:
            addresses.extend(split_addresses(item))
        return addresses
    return [part.strip() for part in display_string(value).split(",") if part.strip()]


class EntityExtractor:
    """Extracts and normalizes entities from the raw company node.

    Attributes:
        debug: If True, prints extraction counts and per-item problems.
    """

    def __init__(self, debug: bool = False):
        self.debug = debug

    def extract(self, company_data: Dict[str, Any]) -> Dict[str, Any]:
        """Extract all entities from the company node.

        Args:
            company_data: One company node as returned by the GraphQL API.

        Returns:
            A dict with keys: company, triggers, locations, users,
            location_index, user_index. See module docstring for the schema.
        """
        company = {
            "id": display_string(company_data.get("id")) if company_data.get("id") is not None else "",
            "name": company_data.get("name") or "",
        }

        raw_triggers = company_data.get("triggers") or []
        if not isinstance(raw_triggers, list):
            raw_triggers = [raw_triggers]
        triggers = [
            self.parse_trigger(raw, index)
            for index, raw in enumerate(raw_triggers, start=1)
        ]

        locations = [
            self._extract_location(node)
            for node in connection_nodes(company_data.get("locations"))
        ]
        users = [
            self._extract_user(node)
            for node in connection_nodes(company_data.get("users"))
            if node.get("id") is not None and node.get("id") != ""
        ]

        result = {
            "company": company,
            "triggers": triggers,
            "locations": locations,
            "users": users,
            "location_index": {loc.id: loc.name for loc in locations},
            "user_index": {user.id: user.label for user in users},
        }

        if self.debug:
            failed = sum(1 for t in triggers if t.is_error)
            print(f"  Extracted: {len(triggers)} triggers ({failed} unparseable), "
                  f"{len(locations)} locations, {len(users)} users")

        return result

    def parse_trigger(self, raw: Any, index: int) -> Trigger:
        """Decode one trigger, isolating any parse failure to this trigger.

        Args:
            raw: A JSON-encoded string or an already-parsed dict.
            index: 1-based position in the trigger list.

        Returns:
            A Trigger. On failure, a Trigger whose `error` is set.
        """
        data = raw
        if isinstance(raw, (str, bytes)):
            try:
                data = json.loads(raw)
            except ValueError as e:
                if self.debug:
                    print(f"  Warning: could not parse trigger {index}: {e}")
                return Trigger(index=index, error=PARSE_ERROR_MESSAGE)

        if not isinstance(data, dict):
            if self.debug:
                print(f"  Warning: trigger {index} is not an object: {data!r}")
            return Trigger(index=index, error=PARSE_ERROR_MESSAGE)

        criteria_data = data.get("criteria")
        if isinstance(criteria_data, dict):
            criteria = to_criteria(criteria_data)
        else:
            if criteria_data is not None and self.debug:
                print(f"  Warning: trigger {index} criteria is not a map, ignoring it")
            criteria = []

        email = data.get("email")
        if not isinstance(email, dict):
            email = {}

        subject = email.get("subject")
        if subject is not None and not isinstance(subject, str):
            subject = display_string(subject)

        return Trigger(
            index=index,
            criteria=criteria,
            recipients=split_addresses(email.get("to")),
            subject=subject or None,
        )

    def _extract_location(self, node: Dict) -> Location:
        """Build a Location, decoding its workflow template modules if present."""
        location_id = node.get("id")
        return Location(
            id=display_string(location_id) if location_id is not None else "",
            name=node.get("name") or "",
            demo=normalize_flag(node.get("demo")),
            active=normalize_flag(node.get("active")) is True,
            modules=self._extract_modules(node),
        )

    def _extract_modules(self, node: Dict) -> Optional[List[Dict]]:
        """Return the template's module list, or None when there is no template."""
        workflow = node.get("workflow")
        if not isinstance(workflow, dict):
            return None

        body = workflow.get("body")
        if isinstance(body, str):
            try:
                body = json.loads(body)
            except ValueError:
                if self.debug:
                    print(f"  Warning: workflow body of location {node.get('id')} "
                          f"is not valid JSON, skipping it")
                return None

        if not isinstance(body, dict):
            return None

        template = body.get("template")
        if not isinstance(template, dict):
            return None

        modules = template.get("modules") or []
        if not isinstance(modules, list):
            return []
        return [module for module in modules if isinstance(module, dict)]

    def _extract_user(self, node: Dict) -> User:
        return User(
            id=display_string(node["id"]),
            name=node.get("name") or "",
            email=node.get("email") or "",
        )
