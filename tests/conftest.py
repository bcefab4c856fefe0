"""
Test fixtures and configuration for pytest
"""
import sys
from pathlib import Path

import pytest
from kubernetes import client

sys.path.insert(0, str(Path(__file__).parent.parent))


def make_container(name, request=None, limit=None):
    requests = {'memory': request} if request is not None else None
    limits = {'memory': limit} if limit is not None else None
    return client.V1Container(
        name=name,
        resources=client.V1ResourceRequirements(requests=requests, limits=limits),
    )


def make_pod(name, node_name, containers, namespace='default'):
    return client.V1Pod(
        metadata=client.V1ObjectMeta(name=name, namespace=namespace),
        spec=client.V1PodSpec(node_name=node_name, containers=containers),
    )


def make_node(name, allocatable_memory):
    return client.V1Node(
        metadata=client.V1ObjectMeta(name=name),
        status=client.V1NodeStatus(allocatable={'memory': allocatable_memory, 'cpu': '4'}),
    )


def make_node_metrics(name, memory):
    return {
        'metadata': {'name': name},
        'timestamp': '2026-01-04T10:00:00Z',
        'window': '30s',
        'usage': {'cpu': '250m', 'memory': memory},
    }


def make_pod_metrics(name, namespace, containers):
    return {
        'metadata': {'name': name, 'namespace': namespace},
        'timestamp': '2026-01-04T10:00:00Z',
        'window': '30s',
        'containers': [
            {'name': c, 'usage': {'cpu': '10m', 'memory': mem}} for c, mem in containers
        ],
    }


@pytest.fixture
def sample_snapshot():
    """Two nodes: node-a is comfortable, node-b is nearly full"""
    pods = [
        make_pod('web-1', 'node-a', [make_container('web', '100', '500')]),
        make_pod('api-1', 'node-b', [
            make_container('api', '400', '800'),
            make_container('sidecar', '100', '100'),
        ], namespace='prod'),
        make_pod('batch-1', 'node-b', [make_container('worker', '300', '600')], namespace='batch'),
        make_pod('pending-1', None, [make_container('job', '5000')]),
    ]
    return {
        'nodes': [make_node('node-b', '1000'), make_node('node-a', '2000')],
        'pods': pods,
        'node_metrics': [make_node_metrics('node-b', '950'), make_node_metrics('node-a', '300')],
        'pod_metrics': [
            make_pod_metrics('web-1', 'default', [('web', '150')]),
            make_pod_metrics('api-1', 'prod', [('api', '600'), ('sidecar', '250')]),
            make_pod_metrics('batch-1', 'batch', [('worker', '200')]),
        ],
    }
