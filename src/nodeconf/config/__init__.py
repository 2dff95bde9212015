"""Configuration document model.

Exports the document dataclasses, the ``Endpoint`` value type and its
decode/encode hooks, and the YAML/dict ``ConfigSerializer``.
"""
from __future__ import annotations

from nodeconf.config.endpoint import (
    Endpoint,
    EndpointParseError,
    parse_endpoint,
    serialize_endpoint,
)
from nodeconf.config.nodes import (
    APIServerConfig,
    BootstrapToken,
    ClusterConfig,
    ClusterNetworkConfig,
    Config,
    ControllerManagerConfig,
    ControlPlaneConfig,
    EtcdConfig,
    ExternalCloudProviderConfig,
    InstallConfig,
    MachineConfig,
    MachineType,
    PEMEncodedCertificateAndKey,
    SchedulerConfig,
)
from nodeconf.config.serializer import ConfigSerializer, DocumentError

__all__ = [
    "APIServerConfig",
    "BootstrapToken",
    "ClusterConfig",
    "ClusterNetworkConfig",
    "Config",
    "ConfigSerializer",
    "ControlPlaneConfig",
    "ControllerManagerConfig",
    "DocumentError",
    "Endpoint",
    "EndpointParseError",
    "EtcdConfig",
    "ExternalCloudProviderConfig",
    "InstallConfig",
    "MachineConfig",
    "MachineType",
    "PEMEncodedCertificateAndKey",
    "SchedulerConfig",
    "parse_endpoint",
    "serialize_endpoint",
]
