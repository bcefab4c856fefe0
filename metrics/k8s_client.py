"""Thin wrapper over the Kubernetes API for the listings the report needs.

Nodes and pods come from the core API; live usage comes from metrics-server
through the metrics.k8s.io custom objects. Every failure is raised, never
retried.
"""
import logging
import os
from typing import Any, Dict, List, Optional

from kubernetes import client, config as kube_config
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException
from urllib3.exceptions import HTTPError

from config import KUBECONFIG, KUBE_CONTEXT, METRICS_API_GROUP, METRICS_API_VERSION

logger = logging.getLogger(__name__)


class ClusterError(Exception):
    pass


class ClusterConnectionError(ClusterError):
    """Credentials could not be loaded or the API server is unreachable"""
    pass


class ClusterQueryError(ClusterError):
    """The API server rejected a listing"""
    pass


def load_kube_config(kubeconfig: Optional[str] = None, context: Optional[str] = None) -> None:
    """Load credentials from a kubeconfig file.

    In-cluster config is used only when no kubeconfig or context was asked
    for and the default kubeconfig file does not exist. A kubeconfig or
    context that was asked for and fails to load is fatal.
    """
    explicit = bool(kubeconfig or context or KUBE_CONTEXT or os.getenv("KUBECONFIG"))
    kubeconfig = kubeconfig or KUBECONFIG
    context = context or KUBE_CONTEXT

    if not explicit and not os.path.exists(kubeconfig):
        try:
            kube_config.load_incluster_config()
        except ConfigException as e:
            raise ClusterConnectionError(
                f"no kubeconfig at {kubeconfig} and in-cluster config unavailable: {e}"
            )
        logger.info("Using in-cluster configuration")
        return

    try:
        kube_config.load_kube_config(config_file=kubeconfig, context=context)
    except (ConfigException, OSError) as e:
        raise ClusterConnectionError(f"unable to load kubeconfig {kubeconfig}: {e}")
    logger.debug(f"Loaded kubeconfig {kubeconfig} (context={context or 'current'})")


class KubeClient:
    """Lists nodes, pods and their metrics across all namespaces"""

    def __init__(self, api_client: Optional[client.ApiClient] = None):
        self.core_v1 = client.CoreV1Api(api_client)
        self.custom = client.CustomObjectsApi(api_client)

    def _call(self, what: str, fn, *args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except ApiException as e:
            raise ClusterQueryError(f"{what} failed: {e.status} {e.reason}")
        except HTTPError as e:
            raise ClusterConnectionError(f"{what} failed: {e}")

    def list_nodes(self) -> List[client.V1Node]:
        resp = self._call("list nodes", self.core_v1.list_node)
        logger.debug(f"Listed {len(resp.items)} nodes")
        return resp.items

    def list_pods(self) -> List[client.V1Pod]:
        resp = self._call("list pods", self.core_v1.list_pod_for_all_namespaces)
        logger.debug(f"Listed {len(resp.items)} pods")
        return resp.items

    def list_node_metrics(self) -> List[Dict[str, Any]]:
        resp = self._call(
            "list node metrics",
            self.custom.list_cluster_custom_object,
            METRICS_API_GROUP, METRICS_API_VERSION, "nodes",
        )
        items = resp.get("items", [])
        logger.debug(f"Listed metrics for {len(items)} nodes")
        return items

    def list_pod_metrics(self) -> List[Dict[str, Any]]:
        resp = self._call(
            "list pod metrics",
            self.custom.list_cluster_custom_object,
            METRICS_API_GROUP, METRICS_API_VERSION, "pods",
        )
        items = resp.get("items", [])
        logger.debug(f"Listed metrics for {len(items)} pods")
        return items
