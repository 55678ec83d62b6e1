"""CLI entrypoint: build a trigger graph artifact from a map file."""

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from .config import load_settings
from .definitions import describe_trigger, describe_variable, load_definitions
from .graph_model import TriggerNode, VariableNode
from .graph_orchestrator import MapGraphOrchestrator
from .map_builder import build_meta, run_pipeline

log = logging.getLogger(__name__)


def build_artifact(context: Dict[str, Any]) -> Dict[str, Any]:
    orchestrator: MapGraphOrchestrator = context["orchestrator"]
    artifact = orchestrator.to_json()
    artifact["meta"] = build_meta(context)
    return artifact


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Parse map triggers into a graph and save JSON artifact.")
    parser.add_argument("--input-path", required=True, help="Path to the map file.")
    parser.add_argument(
        "--output-path",
        default="03_data/trigger_graph.json",
        help="Where to save resulting graph artifact JSON.",
    )
    parser.add_argument(
        "--definitions",
        default=None,
        help="Event/action definition JSON (defaults to TRIGGER_GRAPH_DEFINITIONS).",
    )
    parser.add_argument(
        "--inspect",
        nargs="*",
        default=[],
        metavar="ID",
        help="Entity IDs (e.g. teams) to resolve into related-entity bundles.",
    )
    parser.add_argument(
        "--describe",
        nargs="*",
        default=[],
        metavar="NODE_ID",
        help="Trigger or variable IDs to print as text summaries.",
    )
    parser.add_argument("--encoding", default=None, help="Map file encoding.")
    parser.add_argument("--log-level", default=None, help="Logging level name.")
    return parser.parse_args(argv)


def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv)
    settings = load_settings()
    logging.basicConfig(
        level=getattr(logging, (args.log_level or settings.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    context = run_pipeline(
        input_path=args.input_path,
        encoding=args.encoding or settings.encoding,
        inspect_ids=args.inspect,
    )
    artifact = build_artifact(context)
    output_path = Path(args.output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(artifact, ensure_ascii=False, indent=2), encoding="utf-8")
    print(f"Trigger graph artifact saved to: {output_path.resolve()}")
    print(
        "Counts:",
        f"nodes={len(artifact['nodes'])}",
        f"edges={len(artifact['edges'])}",
        f"warnings={len(artifact['warnings'])}",
    )
    for warning in artifact["warnings"]:
        print(f"Warning: {warning}")

    if args.describe:
        table = load_definitions(args.definitions if args.definitions is not None else settings.definitions_path)
        orchestrator: MapGraphOrchestrator = context["orchestrator"]
        for node_id in args.describe:
            node = orchestrator.get_node(node_id)
            if isinstance(node, TriggerNode):
                print(describe_trigger(node, table))
            elif isinstance(node, VariableNode):
                print(describe_variable(node))
            else:
                log.warning("node %s not found in map", node_id)
                print(f"Node {node_id}: (not found)")
    return 0
