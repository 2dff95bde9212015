"""Configuration document types for a single node and the cluster it joins.

The document is a tree of plain dataclasses rooted at ``Config``.  It is
built by the serializer (or directly in code) and is owned by the caller;
nothing in this package mutates it except ``ClusterConfig.set_cert_sans``.

``ClusterConfig`` also carries the accessor facade: read-only properties
that return *effective* values, falling back to the defaults in
``nodeconf.constants`` whenever the document leaves a setting empty.
Accessors never raise and never modify the document, so calling one
repeatedly on an unchanged document always yields the same value.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from nodeconf import constants
from nodeconf.config.endpoint import Endpoint


# ---------------------------------------------------------------------------
# Machine section
# ---------------------------------------------------------------------------


class MachineType(str, Enum):
    """Role of the node within the cluster."""

    INIT = "init"
    CONTROL_PLANE = "controlplane"
    JOIN = "join"

    @classmethod
    def known(cls) -> frozenset[str]:
        return frozenset(m.value for m in cls)


@dataclass
class InstallConfig:
    """Where and how the node's OS image is installed."""

    disk: str = ""
    image: str = ""
    bootloader: bool = False
    wipe: bool = False
    extra_kernel_args: list[str] = field(default_factory=list)


@dataclass
class MachineConfig:
    """Machine-level instructions.

    Parameters
    ----------
    type:
        One of ``"init"``, ``"controlplane"``, ``"join"``, or empty.
    install:
        Install instructions; required only in runtime modes that install.
    """

    type: str = ""
    install: InstallConfig | None = None


# ---------------------------------------------------------------------------
# Cluster section
# ---------------------------------------------------------------------------


@dataclass
class PEMEncodedCertificateAndKey:
    """A PEM certificate and its private key, stored as raw bytes."""

    crt: bytes = b""
    key: bytes = b""


@dataclass
class ControlPlaneConfig:
    version: str = ""
    # Canonical control-plane address; may differ in port from the
    # port the API server listens on locally.
    endpoint: Endpoint | None = None
    local_api_server_port: int = 0


@dataclass
class APIServerConfig:
    image: str = ""
    extra_args: dict[str, str] = field(default_factory=dict)
    cert_sans: list[str] = field(default_factory=list)


@dataclass
class ControllerManagerConfig:
    image: str = ""
    extra_args: dict[str, str] = field(default_factory=dict)


@dataclass
class SchedulerConfig:
    image: str = ""
    extra_args: dict[str, str] = field(default_factory=dict)


@dataclass
class EtcdConfig:
    image: str = ""
    root_ca: PEMEncodedCertificateAndKey | None = None

    @property
    def ca(self) -> PEMEncodedCertificateAndKey | None:
        return self.root_ca


@dataclass
class ClusterNetworkConfig:
    """Pod networking settings.

    Only the first entry of each subnet list is used by the single-value
    accessors; further entries are kept for dual-stack consumers.
    """

    cni: str = ""
    dns_domain: str = ""
    pod_subnet: list[str] = field(default_factory=list)
    service_subnet: list[str] = field(default_factory=list)


@dataclass
class ExternalCloudProviderConfig:
    enabled: bool = False
    manifests: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class BootstrapToken:
    """Decomposes a ``<id>.<secret>`` bootstrap token.

    A token that does not split into exactly two parts yields empty
    ``id`` and ``secret`` values.
    """

    raw: str = ""

    def _parts(self) -> list[str]:
        parts = self.raw.split(".")
        if len(parts) != 2:
            return ["", ""]
        return parts

    @property
    def id(self) -> str:
        return self._parts()[0]

    @property
    def secret(self) -> str:
        return self._parts()[1]


@dataclass
class ClusterConfig:
    """Cluster-wide settings and the accessor facade over them."""

    control_plane: ControlPlaneConfig | None = None
    cluster_name: str = ""
    cluster_network: ClusterNetworkConfig | None = None
    bootstrap_token: str = ""
    certificate_key: str = ""
    aescbc_encryption_secret: str = ""
    cluster_ca: PEMEncodedCertificateAndKey | None = None
    api_server: APIServerConfig | None = None
    controller_manager: ControllerManagerConfig | None = None
    scheduler: SchedulerConfig | None = None
    etcd_config: EtcdConfig | None = None
    external_cloud_provider_config: ExternalCloudProviderConfig | None = None

    # ------------------------------------------------------------------
    # Control plane
    # ------------------------------------------------------------------

    @property
    def version(self) -> str:
        if self.control_plane is None:
            return ""
        return self.control_plane.version

    @property
    def endpoint(self) -> Endpoint | None:
        """The control-plane endpoint as written; presence is a validator concern."""
        if self.control_plane is None:
            return None
        return self.control_plane.endpoint

    @property
    def local_api_server_port(self) -> int:
        if self.control_plane is None or not self.control_plane.local_api_server_port:
            return constants.DEFAULT_API_SERVER_PORT
        return self.control_plane.local_api_server_port

    # ------------------------------------------------------------------
    # API server certificate SANs
    # ------------------------------------------------------------------

    @property
    def cert_sans(self) -> list[str]:
        if self.api_server is None:
            return []
        return self.api_server.cert_sans

    def set_cert_sans(self, sans: list[str]) -> None:
        """Append ``sans`` to the API server SAN list.

        Existing entries are kept and duplicates are not removed.
        """
        if self.api_server is None:
            self.api_server = APIServerConfig()
        self.api_server.cert_sans.extend(sans)

    # ------------------------------------------------------------------
    # Secrets and PKI
    # ------------------------------------------------------------------

    @property
    def ca(self) -> PEMEncodedCertificateAndKey | None:
        return self.cluster_ca

    @property
    def aescbc_secret(self) -> str:
        return self.aescbc_encryption_secret

    @property
    def etcd(self) -> EtcdConfig:
        if self.etcd_config is None:
            return EtcdConfig()
        return self.etcd_config

    @property
    def token(self) -> BootstrapToken:
        return BootstrapToken(self.bootstrap_token)

    # ------------------------------------------------------------------
    # Network
    # ------------------------------------------------------------------

    @property
    def cni(self) -> str:
        if self.cluster_network is None or not self.cluster_network.cni:
            return constants.DEFAULT_CNI
        return self.cluster_network.cni

    @property
    def pod_cidr(self) -> str:
        if self.cluster_network is None or not self.cluster_network.pod_subnet:
            return constants.DEFAULT_POD_CIDR
        return self.cluster_network.pod_subnet[0]

    @property
    def service_cidr(self) -> str:
        if self.cluster_network is None or not self.cluster_network.service_subnet:
            return constants.DEFAULT_SERVICE_CIDR
        return self.cluster_network.service_subnet[0]

    @property
    def dns_domain(self) -> str:
        if self.cluster_network is None or not self.cluster_network.dns_domain:
            return constants.DEFAULT_DNS_DOMAIN
        return self.cluster_network.dns_domain


# ---------------------------------------------------------------------------
# Document root
# ---------------------------------------------------------------------------


@dataclass
class Config:
    """Top-level configuration document."""

    version: str = constants.DEFAULT_CONFIG_VERSION
    machine_config: MachineConfig | None = None
    cluster_config: ClusterConfig | None = None
