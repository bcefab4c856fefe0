"""
Node analysis - memory headroom per node
Combines live usage, allocatable capacity and declared requests, and lists
containers using more than they requested on nodes without enough headroom
"""
import logging
from typing import Any, Dict, List, Tuple

from kubernetes import client

from analysis.pod_index import PodIndex, container_memory
from normalize.quantity import quantity_to_bytes

logger = logging.getLogger(__name__)

ContainerKey = Tuple[str, str, str]


class MissingNodeError(Exception):
    """A node reports metrics but is absent from the node listing"""
    pass


def _ratio(numerator: int, denominator: int) -> float:
    # IEEE semantics on a zero denominator: inf, or nan for 0/0
    if denominator == 0:
        if numerator == 0:
            return float('nan')
        return float('inf') if numerator > 0 else float('-inf')
    return numerator / denominator


def compute_headroom(allocatable: int, used: int, requests: int, additional: int = 0) -> Dict[str, Any]:
    """Headroom figures for a single node.

    `sufficient` requires both free and schedulable memory to stay strictly
    positive after reserving `additional` bytes.
    """
    free = allocatable - used
    schedulable = allocatable - requests
    free_with_additional = free - additional
    schedulable_with_additional = schedulable - additional

    return {
        'allocatable': allocatable,
        'used': used,
        'free': free,
        'requests': requests,
        'efficiency': _ratio(used, requests),
        'schedulable': schedulable,
        'free_with_additional': free_with_additional,
        'schedulable_with_additional': schedulable_with_additional,
        'sufficient': free_with_additional > 0 and schedulable_with_additional > 0,
    }


def build_container_usage_index(pod_metrics: List[Dict[str, Any]]) -> Dict[ContainerKey, int]:
    """Map (namespace, pod, container) -> used bytes; the first entry for a key wins"""
    index: Dict[ContainerKey, int] = {}
    for pm in pod_metrics:
        metadata = pm.get('metadata', {})
        namespace = metadata.get('namespace', '')
        pod_name = metadata.get('name', '')
        for cm in pm.get('containers', []) or []:
            key = (namespace, pod_name, cm.get('name', ''))
            if key in index:
                continue
            index[key] = quantity_to_bytes(cm.get('usage', {}).get('memory'))
    return index


def find_evictable_containers(
    node_name: str,
    pods: List[client.V1Pod],
    usage_index: Dict[ContainerKey, int],
) -> List[Dict[str, Any]]:
    """Containers on the node whose live usage exceeds a request set below the limit"""
    candidates = []

    for pod in pods:
        namespace = pod.metadata.namespace
        pod_name = pod.metadata.name
        for container in pod.spec.containers or []:
            requested = container_memory(container, 'requests')
            if requested == 0:
                continue

            limit = container_memory(container, 'limits')
            if requested >= limit:
                continue

            used = usage_index.get((namespace, pod_name, container.name))
            if used is None:
                logger.debug(f"No usage reported for {namespace}/{pod_name}/{container.name}")
                continue

            if used > requested:
                candidates.append({
                    'node': node_name,
                    'namespace': namespace,
                    'pod': pod_name,
                    'container': container.name,
                    'requested': requested,
                    'used': used,
                    'limit': limit,
                })

    return candidates


def _allocatable_by_node(nodes: List[client.V1Node]) -> Dict[str, int]:
    allocatable = {}
    for node in nodes:
        values = (node.status.allocatable if node.status else None) or {}
        allocatable[node.metadata.name] = quantity_to_bytes(values.get('memory'))
    return allocatable


def analyze_nodes(
    nodes: List[client.V1Node],
    node_metrics: List[Dict[str, Any]],
    pod_index: PodIndex,
    pod_metrics: List[Dict[str, Any]],
    additional: int = 0,
) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """Analyze every node reporting metrics, in ascending name order

    Returns (node summaries, evictable candidates). Only nodes without
    sufficient headroom are scanned for candidates.
    """
    allocatable = _allocatable_by_node(nodes)
    usage_index = build_container_usage_index(pod_metrics)

    summaries = []
    evictable = []

    for nm in sorted(node_metrics, key=lambda m: m.get('metadata', {}).get('name', '')):
        name = nm.get('metadata', {}).get('name', '')
        if name not in allocatable:
            raise MissingNodeError(f"node {name} reports metrics but was not found")

        used = quantity_to_bytes(nm.get('usage', {}).get('memory'))
        summary = {'name': name}
        summary.update(compute_headroom(
            allocatable[name],
            used,
            pod_index.requests_for(name),
            additional,
        ))
        summaries.append(summary)

        if summary['sufficient']:
            continue

        logger.info(f"Node {name} lacks headroom, scanning for evictable containers")
        evictable.extend(find_evictable_containers(name, pod_index.pods_on(name), usage_index))

    return summaries, evictable
