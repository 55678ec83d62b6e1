from trigger_graph.decoding import (
    ACTION_EDGE_POLICIES,
    decode_actions,
    decode_events,
    parse_int,
    split_stream,
)
from trigger_graph.graph_model import ActionRecord, EventRecord, GraphEdge


def test_parse_int_reads_leading_integer_only():
    assert parse_int("12") == 12
    assert parse_int(" -3") == -3
    assert parse_int("7abc") == 7
    assert parse_int("abc") is None
    assert parse_int("") is None
    assert parse_int(None) is None


def test_split_stream_of_missing_value_is_empty():
    assert split_stream(None) == []
    assert split_stream("") == []


def test_event_arity_follows_flag():
    result = decode_events("2,13,2,1,7,8,0,4", "T1")

    assert result.ok
    assert result.records == [
        EventRecord(opcode=13, params=["1", "7"]),
        EventRecord(opcode=8, params=["4"]),
    ]


def test_local_variable_event_points_from_variable_to_trigger():
    result = decode_events("1,36,0,5", "T1")

    assert result.edges == [GraphEdge(kind="enable", source="L5", target="T1", directed=True, dashed=True)]
    assert result.global_refs == []


def test_global_variable_events_register_global_refs_once():
    result = decode_events("2,27,0,3,28,0,3", "T1")

    assert result.global_refs == ["3"]
    assert [(edge.kind, edge.source) for edge in result.edges] == [("enable", "G3"), ("disable", "G3")]


def test_event_with_non_numeric_opcode_still_yields_record():
    result = decode_events("1,xx,0,5", "T1")

    assert not result.ok
    assert "non-numeric opcode" in result.error
    assert result.records == [EventRecord(opcode=None, params=["5"])]
    assert result.edges == []


def test_truncated_event_stream_pads_params():
    result = decode_events("1,13,2,1", "T1")

    assert not result.ok
    assert "truncated" in result.error
    assert result.records == [EventRecord(opcode=13, params=["1", ""])]


def test_actions_stop_at_declared_count():
    raw = "2,53,0,T2,0,0,0,0,A,12,0,T3,0,0,0,0,A,22,0,T4,0,0,0,0,A"
    result = decode_actions(raw, "T1")

    assert result.ok
    assert [record.opcode for record in result.records] == [53, 12]
    assert [(edge.kind, edge.target) for edge in result.edges] == [("enable", "T2"), ("destroy", "T3")]


def test_short_action_record_pads_with_empty_strings():
    result = decode_actions("1,22,0,T2", "T1")

    assert result.records == [ActionRecord(opcode=22, params=["0", "T2", "", "", "", "", ""])]
    assert result.edges == [GraphEdge(kind="force", source="T1", target="T2")]


def test_variable_actions_use_prefixed_targets():
    result = decode_actions("3,56,0,4,0,0,0,0,A,29,0,9,0,0,0,0,A,28,0,9,0,0,0,0,A", "T1")

    assert [(edge.kind, edge.target, edge.dashed) for edge in result.edges] == [
        ("enable", "L4", True),
        ("disable", "G9", True),
        ("enable", "G9", True),
    ]
    assert result.global_refs == ["9"]


def test_disable_class_edges_for_events_and_actions():
    events = decode_events("1,37,0,6", "T1")
    actions = decode_actions("2,54,0,T2,0,0,0,0,A,57,0,6,0,0,0,0,A", "T1")

    assert events.edges == [GraphEdge(kind="disable", source="L6", target="T1", directed=True, dashed=True)]
    assert actions.edges == [
        GraphEdge(kind="disable", source="T1", target="T2"),
        GraphEdge(kind="disable", source="T1", target="L6", directed=True, dashed=True),
    ]


def test_every_decode_failure_reason_is_kept():
    result = decode_events("2,xx,0,5,13,2,1", "T1")

    assert len(result.errors) == 2
    assert "non-numeric opcode" in result.errors[0]
    assert "truncated" in result.errors[1]
    assert result.error == "; ".join(result.errors)


def test_non_edge_actions_emit_nothing():
    result = decode_actions("1,11,0,T2,0,0,0,0,A", "T1")

    assert 11 not in ACTION_EDGE_POLICIES
    assert result.edges == []
    assert len(result.records) == 1


def test_action_count_not_numeric_fails_soft():
    result = decode_actions("x,53,0,T2,0,0,0,0,A", "T1")

    assert result.records == []
    assert "action count" in result.error


def test_declared_count_larger_than_stream_is_reported():
    result = decode_actions("3,53,0,T2,0,0,0,0,A", "T1")

    assert len(result.records) == 1
    assert "declared 3 actions but decoded 1" == result.error


def test_missing_streams_decode_to_nothing():
    assert decode_events(None, "T1").records == []
    assert decode_actions("", "T1").records == []
    assert decode_actions("0", "T1").ok
