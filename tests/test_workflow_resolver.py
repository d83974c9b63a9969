"""Tests for core.workflow_resolver."""

from core.models import Location
from core.workflow_resolver import (
    ModulePairing,
    WorkflowModuleResolver,
    coerce_option_keys,
    resolve,
)


def branch(key, *options):
    return {"key": key, "logic_branch": {"options": list(options)}}


def email(key, include_bcc=None, send_to=None):
    body = {}
    if include_bcc is not None:
        body["include_bcc"] = include_bcc
    if send_to is not None:
        body["send_to_text_default"] = send_to
    return {"key": key, "email": body}


def test_coerce_option_keys():
    assert coerce_option_keys("E1, E2") == ["E1", "E2"]
    assert coerce_option_keys(["E1", 2, None]) == ["E1", "2"]
    assert coerce_option_keys(True) == ["true"]
    assert coerce_option_keys(5) == ["5"]
    assert coerce_option_keys(None) is None


def test_pairs_email_module_with_label():
    modules = [
        branch("L1", {"value": "E1,E2", "label": "Path A"}),
        email("E1", include_bcc="a@x.com"),
        email("E2", include_bcc=""),
    ]
    assert resolve(modules) == [ModulePairing("E1", ["a@x.com"], ["Path A"])]


def test_labels_accumulate_across_options_and_branches():
    modules = [
        branch("L1", {"value": "E1", "label": "Damage"}, {"value": ["E1"], "label": "Fuel"}),
        branch("L2", {"value": "E1", "label": "Return"}),
        email("E1", send_to="a@x.com"),
    ]
    pairings = resolve(modules)
    assert pairings[0].workflow_labels == ["Damage", "Fuel", "Return"]


def test_recipients_concatenate_in_order_and_keep_duplicates():
    modules = [
        branch("L1", {"value": "E1", "label": "A"}),
        email("E1", include_bcc="b@x.com, a@x.com", send_to=" a@x.com ,"),
    ]
    assert resolve(modules)[0].recipients == ["b@x.com", "a@x.com", "a@x.com"]


def test_email_module_without_labels_excluded():
    modules = [email("E1", include_bcc="a@x.com")]
    assert resolve(modules) == []


def test_null_option_value_skipped(capsys):
    modules = [
        branch("L1", {"value": None, "label": "Skip"}, {"label": "Absent"}),
        email("E1", include_bcc="a@x.com"),
    ]
    resolver = WorkflowModuleResolver(debug=True)
    assert resolver.resolve(modules) == []
    assert "Skipping option" in capsys.readouterr().out


def test_boolean_option_value_is_a_key():
    modules = [
        branch("L1", {"value": True, "label": "Yes"}),
        email("E1", include_bcc="a@x.com"),
    ]
    resolver = WorkflowModuleResolver()
    branches, _, _ = resolver.classify(modules)
    assert resolver.build_label_index(branches) == {"true": ["Yes"]}
    assert resolver.resolve(modules) == []


def test_classify_by_shape():
    modules = [
        branch("L1", {"value": "E1", "label": "A"}),
        email("E1", include_bcc="a@x.com"),
        {"key": "P1", "photo": {}},
        {"key": 5},
        {"logic_branch": None, "key": "Q"},
    ]
    branches, emails, other = WorkflowModuleResolver().classify(modules)
    assert [b.key for b in branches] == ["L1"]
    assert [e.key for e in emails] == ["E1"]
    assert other == 3


def test_module_with_both_shapes_plays_both_roles():
    modules = [
        {
            "key": "E9",
            "logic_branch": {"options": [{"value": "E9", "label": "Self"}]},
            "email": {"include_bcc": "self@x.com"},
        }
    ]
    assert resolve(modules) == [ModulePairing("E9", ["self@x.com"], ["Self"])]


def test_email_module_without_email_body():
    modules = [branch("L1", {"value": "E1", "label": "A"}), {"key": "E1"}]
    assert resolve(modules) == []


def test_logic_branch_without_options():
    modules = [{"key": "L1", "logic_branch": {"options": None}}, email("E1", include_bcc="a@x.com")]
    assert resolve(modules) == []


def test_resolve_locations_drops_empty_and_absent():
    resolver = WorkflowModuleResolver()
    locations = [
        Location(id="1", name="No template", modules=None),
        Location(id="2", name="Nothing qualifies", modules=[email("E1", include_bcc="a@x.com")]),
        Location(id="3", name="Good", modules=[
            branch("L1", {"value": "E1", "label": "A"}),
            email("E1", include_bcc="a@x.com"),
        ]),
    ]
    results = resolver.resolve_locations(locations)
    assert [r.location.name for r in results] == ["Good"]
    assert results[0].pairings == [ModulePairing("E1", ["a@x.com"], ["A"])]


def test_fixture_locations(entities):
    resolver = WorkflowModuleResolver()
    results = {r.location.name: r.pairings for r in resolver.resolve_locations(entities["locations"])}
    assert set(results) == {"Downtown Depot", "Demo Lot", "Harbor"}
    assert results["Downtown Depot"] == [
        ModulePairing("E1", ["bcc@acme.com", "yard@acme.com"], ["Damage Found", "Missing Fuel"])
    ]
    assert results["Harbor"][0].recipients == ["harbor@acme.com", "harbor@acme.com"]


def test_non_dict_modules_counted_as_other():
    modules = [
        None,
        "E1",
        branch("L1", {"value": "E1", "label": "A"}),
        42,
        email("E1", include_bcc="a@x.com"),
    ]
    branches, emails, other = WorkflowModuleResolver().classify(modules)
    assert len(branches) == 1
    assert len(emails) == 1
    assert other == 3
    assert resolve(modules) == [ModulePairing("E1", ["a@x.com"], ["A"])]
