"""Orchestrator: load credentials -> snapshot cluster -> headroom analysis -> render.
All cluster reads happen up front. Any failure aborts the run with exit status 1;
nothing is printed unless every listing succeeded.
"""
import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

import config as cfg
from config import setup_logging
from metrics import discovery as discovery_mod
from metrics.k8s_client import ClusterError, KubeClient, load_kube_config
from analysis import node_analysis as node_analysis_mod
from analysis.node_analysis import MissingNodeError
from analysis.pod_index import PodIndex
from normalize.quantity import parse_memory_amount
import report

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Report per-node memory headroom and containers using more memory than requested',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Headroom with nothing extra reserved
  python3 orchestrator.py

  # Would another 512MiB fit on each node?
  python3 orchestrator.py 512MiB

  # Use a specific kubeconfig context and keep a JSON copy
  python3 orchestrator.py 2GiB --context prod --output headroom.json
        """
    )
    parser.add_argument(
        'additional', nargs='?', default='0',
        help='Additional memory to reserve on each node, e.g. 512MiB (default: 0)'
    )
    parser.add_argument('--kubeconfig', help='Path to kubeconfig (default: $KUBECONFIG or ~/.kube/config)')
    parser.add_argument('--context', help='Kubeconfig context to use')
    parser.add_argument('-o', '--output', help='Also write a JSON report to this path')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    return parser


def run_once(additional: int, kube: Optional[KubeClient] = None) -> Dict[str, List[Dict[str, Any]]]:
    """Fetch the cluster snapshot and compute node summaries and eviction candidates"""
    snapshot = discovery_mod.collect_snapshot(kube)

    pod_index = PodIndex(snapshot['pods'])
    logger.debug(f"Indexed pods on {len(pod_index.nodes())} nodes")

    summaries, evictable = node_analysis_mod.analyze_nodes(
        snapshot['nodes'],
        snapshot['node_metrics'],
        pod_index,
        snapshot['pod_metrics'],
        additional,
    )
    logger.info(f"Analyzed {len(summaries)} nodes, {len(evictable)} evictable containers")
    return {'nodes': summaries, 'evictable': evictable}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging('DEBUG' if args.verbose else None)

    try:
        cfg.validate_config()
        if args.output:
            cfg._validate_output_path("--output", args.output)
    except cfg.ConfigValidationError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    try:
        additional = parse_memory_amount(args.additional)
    except ValueError as e:
        logger.error(f"Invalid additional memory amount: {e}")
        return 1

    try:
        load_kube_config(args.kubeconfig, args.context)
        result = run_once(additional, KubeClient())
    except (ClusterError, MissingNodeError) as e:
        logger.error(f"Cluster error: {e}")
        return 1

    print(report.render_nodes(result['nodes'], args.additional))
    print()
    print(report.render_evictable(result['evictable']))

    output_path = args.output or cfg.REPORT_OUTPUT_PATH
    if output_path:
        try:
            report.write_report(output_path, report.build_report(result['nodes'], result['evictable'], additional))
        except OSError as e:
            logger.error(f"Failed to write report to {output_path}: {e}")
            return 1
        logger.info(f"Wrote report to {output_path}")

    return 0


if __name__ == '__main__':
    raise SystemExit(main(sys.argv[1:]))
