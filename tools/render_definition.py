#!/usr/bin/env python3
# ============================================================================
# CLI DEFINITION RENDER TOOL
# ============================================================================
# EPOCH: 1 - DEFINITION RENDERING
# STATUS: Tool - Render definition templates from files
# PURPOSE: Try workload and trait templates without a controller
# CREATED: 19 OCT 2026
# ============================================================================
"""
Render a workload template, then any number of trait templates, for one
component and print the resulting objects as YAML.

Usage:
    # Workload only
    python tools/render_definition.py webservice.yaml --app shop --component frontend

    # With parameters and traits (applied in order)
    python tools/render_definition.py webservice.yaml \\
        --params '{"image": "nginx:1.25", "port": 80}' \\
        --trait ingress=ingress.yaml --trait-params ingress='{"domain": "shop.local"}' \\
        --trait scaler=scaler.yaml

    # Evaluate a health policy against the live cluster afterwards
    python tools/render_definition.py webservice.yaml --health policy.yaml --namespace default

Requires (for --health / --status):
    KUBE_API_SERVER (default https://kubernetes.default.svc) and a token at
    KUBE_TOKEN_PATH
"""

import argparse
import json
import os
import sys
from typing import Dict, List, Tuple

import yaml

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from cluster import KubeApiReader
from core.errors import DefinitionError
from core.logging import ComponentType, configure_logging, get_logger
from definition import TraitRenderer, WorkloadRenderer
from process import ExecutionContext

logger = get_logger("render_definition", ComponentType.TOOL)


def _read(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def _parse_pairs(values: List[str], option: str) -> List[Tuple[str, str]]:
    pairs = []
    for value in values:
        name, sep, rest = value.partition("=")
        if not sep or not name:
            raise ValueError(f"{option} expects NAME=VALUE, got {value!r}")
        pairs.append((name, rest))
    return pairs


def render_component(
    workload_path: str,
    app_name: str,
    component: str,
    params: Dict = None,
    traits: List[Tuple[str, str]] = (),
    trait_params: Dict[str, Dict] = None,
) -> Tuple[ExecutionContext, WorkloadRenderer, List[TraitRenderer]]:
    """Render the workload and traits into a fresh execution context."""
    ctx = ExecutionContext(component, app_name)
    trait_params = trait_params or {}

    workload = WorkloadRenderer(os.path.splitext(os.path.basename(workload_path))[0])
    workload = workload.with_params(params)
    workload.complete(ctx, _read(workload_path))

    renderers = []
    for name, path in traits:
        trait = TraitRenderer(name).with_params(trait_params.get(name))
        trait.complete(ctx, _read(path))
        renderers.append(trait)
    logger.info(f"Rendered component {component} of {app_name} with {len(renderers)} traits")
    return ctx, workload, renderers


def dump_objects(ctx: ExecutionContext) -> str:
    """YAML stream of the base followed by every auxiliary."""
    base, auxiliaries = ctx.output()
    docs = []
    if base is not None:
        docs.append(base.to_dict())
    docs.extend(aux.ins.to_dict() for aux in auxiliaries)
    return yaml.safe_dump_all(docs, sort_keys=False)


def main():
    parser = argparse.ArgumentParser(
        description="Render definition templates for one component",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s webservice.yaml --params '{"image": "nginx"}'
  %(prog)s webservice.yaml --trait ingress=ingress.yaml --trait-params ingress='{"domain": "a.b"}'
  %(prog)s webservice.yaml --health policy.yaml --namespace default
        """,
    )
    parser.add_argument("workload", help="Workload template file")
    parser.add_argument("--app", "-a", default="app", help="Application name (default: app)")
    parser.add_argument("--component", "-c", default="component", help="Component name (default: component)")
    parser.add_argument("--params", "-p", help="JSON workload parameters")
    parser.add_argument(
        "--trait", "-t",
        action="append",
        default=[],
        help="NAME=FILE trait template, repeatable, applied in order",
    )
    parser.add_argument(
        "--trait-params",
        action="append",
        default=[],
        help="NAME=JSON trait parameters, repeatable",
    )
    parser.add_argument("--health", help="Workload health policy file, evaluated against the cluster")
    parser.add_argument("--status", help="Workload status template file, evaluated against the cluster")
    parser.add_argument("--namespace", "-n", default="default", help="Namespace (default: default)")
    parser.add_argument("--log-level", default="WARNING", help="Log level (default: WARNING)")

    args = parser.parse_args()
    configure_logging(args.log_level)

    try:
        params = json.loads(args.params) if args.params else None
        traits = _parse_pairs(args.trait, "--trait")
        trait_params = {
            name: json.loads(raw)
            for name, raw in _parse_pairs(args.trait_params, "--trait-params")
        }
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        ctx, workload, _ = render_component(
            args.workload, args.app, args.component, params, traits, trait_params
        )
        print(dump_objects(ctx), end="")

        if args.health or args.status:
            reader = KubeApiReader()
            if args.health:
                healthy = workload.health_check(ctx, reader, args.namespace, _read(args.health))
                print(f"# healthy: {healthy}")
            if args.status:
                message = workload.status(ctx, reader, args.namespace, _read(args.status))
                print(f"# status: {message}")
    except DefinitionError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(2)
    except OSError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
