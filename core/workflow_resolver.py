"""
Workflow Module Resolver — Pairs a location's email modules with their workflows.

A location's workflow template is an ordered list of modules with no type tag.
Two shapes matter here:

  Logic branch   {"key": "L1", "logic_branch": {"options": [
                     {"value": "E1,E2", "label": "Damage found"}]}}
  Email module   {"key": "E1", "email": {"include_bcc": "a@x.com",
                                          "send_to_text_default": "b@x.com"}}

Each branch option points at one or more downstream module keys through its
`value`. Walking every option builds a module-key -> [label, ...] index, which
tells us under which workflow paths an email module fires.

Option value coercion:
  "E1, E2"        -> ["E1", "E2"]     comma-separated, trimmed
  ["E1", 2]       -> ["E1", "2"]      each element's string form
  true / 5        -> ["true"] / ["5"] a single key
  null / missing  -> option skipped

An email module is reported only when it has at least one recipient AND at
least one workflow label. A module carrying both shapes plays both roles.

Pipeline context:
    Used in Step 5 of the orchestrator pipeline on every Location produced by
    EntityExtractor (Step 3). Output feeds RowProjector.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .entity_extractor import split_addresses
from .models import Location, display_string

EMAIL_MODULE_PREFIX = "E"


@dataclass
class BranchOption:
    label: str
    module_keys: List[str] = field(default_factory=list)


@dataclass
class LogicBranchModule:
    key: str
    options: List[BranchOption] = field(default_factory=list)


@dataclass
class EmailModule:
    key: str
    recipients: List[str] = field(default_factory=list)


@dataclass
class ModulePairing:
    """An email module together with its recipients and workflow labels."""
    module_key: str
    recipients: List[str]
    workflow_labels: List[str]


@dataclass
class LocationTriggers:
    location: Location
    pairings: List[ModulePairing]


def coerce_option_keys(value: Any) -> Optional[List[str]]:
    """Normalize a branch option's value into module keys.

    Returns None when the value is null/absent, so the caller can skip it.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return [key.strip() for key in value.split(",") if key.strip()]
    if isinstance(value, (list, tuple)):
        return [display_string(key) for key in value if key is not None]
    return [display_string(value)]


def is_email_module(module: Dict[str, Any]) -> bool:
    key = module.get("key")
    return isinstance(key, str) and key.startswith(EMAIL_MODULE_PREFIX)


def is_logic_branch(module: Dict[str, Any]) -> bool:
    return bool(module.get("logic_branch"))


class WorkflowModuleResolver:
    """Resolves workflow template modules into email module pairings.

    Attributes:
        debug: If True, prints skipped options and per-location counts.
    """

    def __init__(self, debug: bool = False):
        self.debug = debug

    def classify(
        self, modules: Sequence[Dict[str, Any]]
    ) -> Tuple[List[LogicBranchModule], List[EmailModule], int]:
        """Partition raw modules by shape.

        Returns:
            (logic_branches, email_modules, other_count)
        """
        branches = []
        emails = []
        other = 0

        for module in modules:
            if not isinstance(module, dict):
                other += 1
                continue
            matched = False
            if is_logic_branch(module):
                branches.append(self._to_logic_branch(module))
                matched = True
            if is_email_module(module):
                emails.append(self._to_email_module(module))
                matched = True
            if not matched:
                other += 1

        return branches, emails, other

    def build_label_index(self, branches: Sequence[LogicBranchModule]) -> Dict[str, List[str]]:
        """Map each referenced module key to the labels of the options pointing at it."""
        index: Dict[str, List[str]] = {}
        for branch in branches:
            for option in branch.options:
                for key in option.module_keys:
                    index.setdefault(key, []).append(option.label)
        return index

    def resolve(self, modules: Sequence[Dict[str, Any]]) -> List[ModulePairing]:
        """Pair every qualifying email module with its recipients and labels.

        Args:
            modules: The raw template module dicts, in template order.

        Returns:
            Pairings in email-module order. Modules without recipients or
            without any referencing branch option are left out.
        """
        branches, emails, _ = self.classify(modules)
        label_index = self.build_label_index(branches)

        pairings = []
        for email_module in emails:
            labels = label_index.get(email_module.key, [])
            if email_module.recipients and labels:
                pairings.append(ModulePairing(
                    module_key=email_module.key,
                    recipients=list(email_module.recipients),
                    workflow_labels=list(labels),
                ))
        return pairings

    def resolve_locations(self, locations: Sequence[Location]) -> List[LocationTriggers]:
        """Resolve every location, dropping those with nothing to report."""
        results = []
        for location in locations:
            if location.modules is None:
                if self.debug:
                    print(f"  Location {location.name}: no workflow template")
                continue

            pairings = self.resolve(location.modules)
            if self.debug:
                print(f"  Location {location.name}: {len(location.modules)} modules, "
                      f"{len(pairings)} email triggers")
            if pairings:
                results.append(LocationTriggers(location, pairings))
        return results

    def _to_logic_branch(self, module: Dict[str, Any]) -> LogicBranchModule:
        logic_branch = module.get("logic_branch")
        raw_options = logic_branch.get("options") if isinstance(logic_branch, dict) else None

        options = []
        for raw in raw_options or []:
            if not isinstance(raw, dict):
                continue
            keys = coerce_option_keys(raw.get("value"))
            if keys is None:
                if self.debug:
                    print(f"  Skipping option with null or undefined value: {raw}")
                continue
            label = raw.get("label")
            options.append(BranchOption(
                label="" if label is None else display_string(label),
                module_keys=keys,
            ))

        key = module.get("key")
        return LogicBranchModule(key="" if key is None else display_string(key), options=options)

    def _to_email_module(self, module: Dict[str, Any]) -> EmailModule:
        email = module.get("email")
        if not isinstance(email, dict):
            email = {}
        recipients = (
            split_addresses(email.get("include_bcc") or "")
            + split_addresses(email.get("send_to_text_default") or "")
        )
        return EmailModule(key=module["key"], recipients=recipients)


def resolve(modules: Sequence[Dict[str, Any]]) -> List[ModulePairing]:
    """Resolve one template's modules. See WorkflowModuleResolver.resolve()."""
    return WorkflowModuleResolver().resolve(modules)
