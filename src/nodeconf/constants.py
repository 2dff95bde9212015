"""System-wide default values used when a configuration document leaves a
setting unspecified.
"""
from __future__ import annotations

DEFAULT_CONFIG_VERSION: str = "v1alpha1"

DEFAULT_API_SERVER_PORT: int = 6443

DEFAULT_CNI: str = "flannel"

DEFAULT_POD_CIDR: str = "10.244.0.0/16"

DEFAULT_SERVICE_CIDR: str = "10.96.0.0/12"

DEFAULT_DNS_DOMAIN: str = "cluster.local"
