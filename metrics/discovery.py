from typing import Any, Dict, Optional

from .k8s_client import KubeClient


def collect_snapshot(kube: Optional[KubeClient] = None) -> Dict[str, Any]:
    """Fetch every listing the report needs before any computation starts.

    The four calls are independent, so the listings may reflect slightly
    different points in time. Any failure propagates and aborts the run.
    """
    if kube is None:
        kube = KubeClient()

    nodes = kube.list_nodes()
    pods = kube.list_pods()
    node_metrics = kube.list_node_metrics()
    pod_metrics = kube.list_pod_metrics()

    return {
        'nodes': nodes,
        'pods': pods,
        'node_metrics': node_metrics,
        'pod_metrics': pod_metrics,
    }
