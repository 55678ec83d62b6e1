from trigger_graph import build_map_model, run_pipeline
from trigger_graph.phases.reference_resolver import extract_reference, find_reference, resolve_bundle
from trigger_graph.sections import SectionStore


def test_team_with_script_and_no_task_force(sample_map):
    bundle = resolve_bundle(sample_map, "Team1")

    assert bundle.primary.occurrences == 2
    assert bundle.primary.values == {"Name": "Strike team renamed", "Script": "Script9 ; attack script", "Priority": "5"}
    assert bundle.secondary1 is not None
    assert bundle.secondary1.id == "Script9"
    assert bundle.secondary1.values == {"0": "0,2"}
    assert bundle.secondary2 is None


def test_alias_keys_are_checked_in_order():
    text = "[Team2]\nScriptTypeId=S1\nTaskforce=TF1 (infantry)\n[S1]\nx=1\n[TF1]\n0=1,E1\n"
    bundle = resolve_bundle(SectionStore(text), "Team2")

    assert bundle.secondary1.id == "S1"
    assert bundle.secondary2.id == "TF1"
    assert bundle.secondary2.values == {"0": "1,E1"}


def test_reference_to_missing_section_is_unset():
    bundle = resolve_bundle("[Team3]\nScript=Ghost\n", "Team3")

    assert bundle.primary.found
    assert bundle.secondary1 is None
    assert bundle.secondary2 is None


def test_missing_primary_is_empty_not_error():
    bundle = resolve_bundle("[Other]\nx=1\n", "Team4")

    assert not bundle.primary.found
    assert bundle.secondary1 is None


def test_extract_reference_takes_first_token():
    assert extract_reference("Script9 ; note") == "Script9"
    assert extract_reference("  TF1,extra") == "TF1"
    assert extract_reference("TF2(comment)") == "TF2"
    assert extract_reference("   ") == ""


def test_find_reference_first_alias_wins():
    assert find_reference({"ScriptId": "B", "Script": "A"}, ("Script", "ScriptTypeId", "ScriptId")) == "A"
    assert find_reference({}, ("Script",)) == ""


def test_resolver_does_not_change_graph_output(sample_map):
    plain = build_map_model(sample_map)
    inspected = build_map_model(sample_map, inspect_ids=["Team1"])

    assert [node.id for node in plain.nodes] == [node.id for node in inspected.nodes]
    assert plain.edges == inspected.edges
    assert plain.warnings == inspected.warnings


def test_resolver_phase_reports_bundles(sample_map):
    context = run_pipeline(map_text=sample_map, inspect_ids=["Team1", "Nope"])
    output = context["resolver_output"]

    assert output["summary"] == {"input_count": 2, "resolved_count": 1, "unresolved_ids": ["Nope"]}
    assert output["bundles"]["Team1"]["secondary1"]["id"] == "Script9"
    assert output["bundles"]["Team1"]["secondary2"] is None
