"""
Pod index - groups pod snapshots by the node they are scheduled on
"""
import copy
from typing import Dict, Iterable, List

from kubernetes import client

from normalize.quantity import quantity_to_bytes


def container_memory(container: client.V1Container, kind: str) -> int:
    """Memory request or limit of a container in bytes, zero when absent"""
    resources = container.resources
    if resources is None:
        return 0
    values = getattr(resources, kind) or {}
    return quantity_to_bytes(values.get('memory'))


class PodIndex:
    """Read-only mapping of node name -> pods scheduled on it.

    Pods are deep-copied on the way in; pods with no assigned node are dropped.
    """

    def __init__(self, pods: Iterable[client.V1Pod]):
        self._by_node: Dict[str, List[client.V1Pod]] = {}
        for pod in pods:
            node_name = pod.spec.node_name if pod.spec else None
            if not node_name:
                continue
            self._by_node.setdefault(node_name, []).append(copy.deepcopy(pod))

    def nodes(self) -> List[str]:
        return sorted(self._by_node)

    def pods_on(self, node_name: str) -> List[client.V1Pod]:
        return list(self._by_node.get(node_name, []))

    def requests_for(self, node_name: str) -> int:
        """Sum of container memory requests across all pods on the node"""
        total = 0
        for pod in self._by_node.get(node_name, []):
            for container in pod.spec.containers or []:
                total += container_memory(container, 'requests')
        return total
