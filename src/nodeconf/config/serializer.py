"""Serialization of the configuration document to and from dicts and YAML.

The serialized form is a plain dict/list structure using the document's
camelCase keys, so it maps directly onto YAML or JSON.  Certificate and
key material is written as base64 of the PEM bytes.

The control-plane ``endpoint`` is the only field with a custom hook: it is
decoded with ``parse_endpoint`` and encoded with ``serialize_endpoint``.

Usage
-----
::

    from nodeconf.config.serializer import ConfigSerializer

    serializer = ConfigSerializer()
    config = serializer.from_yaml(text)
    text2 = serializer.to_yaml(config)
"""
from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Any

import yaml

from nodeconf.config.endpoint import parse_endpoint, serialize_endpoint
from nodeconf.config.nodes import (
    APIServerConfig,
    ClusterConfig,
    ClusterNetworkConfig,
    Config,
    ControllerManagerConfig,
    ControlPlaneConfig,
    EtcdConfig,
    ExternalCloudProviderConfig,
    InstallConfig,
    MachineConfig,
    PEMEncodedCertificateAndKey,
    SchedulerConfig,
)
from nodeconf.constants import DEFAULT_CONFIG_VERSION

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class DocumentError(ValueError):
    """Raised when a document does not have the expected structure.

    Parameters
    ----------
    path:
        Dotted key path of the offending value, e.g. ``cluster.network``.
    message:
        What was wrong with it.
    """

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"

    def __post_init__(self) -> None:
        self.args = (str(self),)


def _type_name(value: object) -> str:
    return type(value).__name__


def _key_path(path: str, key: str) -> str:
    return f"{path}.{key}" if path else key


def _section(data: dict[str, Any], key: str, path: str) -> dict[str, Any] | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise DocumentError(_key_path(path, key), f"expected a mapping, got {_type_name(value)}")
    return value


def _str(data: dict[str, Any], key: str, path: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise DocumentError(_key_path(path, key), f"expected a string, got {_type_name(value)}")
    return value


def _bool(data: dict[str, Any], key: str, path: str) -> bool:
    value = data.get(key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise DocumentError(_key_path(path, key), f"expected a boolean, got {_type_name(value)}")
    return value


def _int(data: dict[str, Any], key: str, path: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise DocumentError(_key_path(path, key), f"expected an integer, got {_type_name(value)}")
    return value


def _str_list(data: dict[str, Any], key: str, path: str) -> list[str]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise DocumentError(_key_path(path, key), "expected a list of strings")
    return list(value)


def _str_map(data: dict[str, Any], key: str, path: str) -> dict[str, str]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise DocumentError(_key_path(path, key), f"expected a mapping, got {_type_name(value)}")
    # extraArgs values are frequently written as bare numbers or booleans
    return {str(k): str(v).lower() if isinstance(v, bool) else str(v) for k, v in value.items()}


def _pem(data: dict[str, Any], key: str, path: str) -> bytes:
    value = _str(data, key, path)
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DocumentError(_key_path(path, key), f"invalid base64: {exc}") from exc


def _compact(data: dict[str, Any]) -> dict[str, Any]:
    """Drop keys whose values are ``None`` or empty, like ``omitempty``."""
    return {k: v for k, v in data.items() if v not in (None, "", [], {}, 0, False)}


class ConfigSerializer:
    """Converts between ``Config`` documents and plain Python dicts."""

    # ------------------------------------------------------------------
    # Serialization (document → dict)
    # ------------------------------------------------------------------

    def to_dict(self, config: Config) -> dict[str, Any]:
        """Serialize a ``Config`` to a JSON-compatible dict."""
        data: dict[str, Any] = {"version": config.version}
        if config.machine_config is not None:
            data["machine"] = self._machine_to_dict(config.machine_config)
        if config.cluster_config is not None:
            data["cluster"] = self._cluster_to_dict(config.cluster_config)
        return data

    def _machine_to_dict(self, m: MachineConfig) -> dict[str, Any]:
        install = None
        if m.install is not None:
            install = _compact({
                "disk": m.install.disk,
                "image": m.install.image,
                "bootloader": m.install.bootloader,
                "wipe": m.install.wipe,
                "extraKernelArgs": list(m.install.extra_kernel_args),
            })
        return _compact({"type": m.type, "install": install})

    def _pem_to_dict(self, pem: PEMEncodedCertificateAndKey | None) -> dict[str, str] | None:
        if pem is None:
            return None
        return {
            "crt": base64.b64encode(pem.crt).decode("ascii"),
            "key": base64.b64encode(pem.key).decode("ascii"),
        }

    def _component_to_dict(
        self, c: APIServerConfig | ControllerManagerConfig | SchedulerConfig | None
    ) -> dict[str, Any] | None:
        if c is None:
            return None
        data: dict[str, Any] = {"image": c.image, "extraArgs": dict(c.extra_args)}
        if isinstance(c, APIServerConfig):
            data["certSANs"] = list(c.cert_sans)
        return _compact(data)

    def _cluster_to_dict(self, c: ClusterConfig) -> dict[str, Any]:
        control_plane = None
        if c.control_plane is not None:
            cp = c.control_plane
            control_plane = _compact({
                "version": cp.version,
                "endpoint": serialize_endpoint(cp.endpoint) if cp.endpoint is not None else None,
                "localAPIServerPort": cp.local_api_server_port,
            })

        network = None
        if c.cluster_network is not None:
            n = c.cluster_network
            network = _compact({
                "cni": n.cni,
                "dnsDomain": n.dns_domain,
                "podSubnets": list(n.pod_subnet),
                "serviceSubnets": list(n.service_subnet),
            })

        etcd = None
        if c.etcd_config is not None:
            etcd = _compact({
                "image": c.etcd_config.image,
                "ca": self._pem_to_dict(c.etcd_config.root_ca),
            })

        external = None
        if c.external_cloud_provider_config is not None:
            e = c.external_cloud_provider_config
            external = _compact({"enabled": e.enabled, "manifests": list(e.manifests)})

        return _compact({
            "controlPlane": control_plane,
            "clusterName": c.cluster_name,
            "network": network,
            "token": c.bootstrap_token,
            "certificateKey": c.certificate_key,
            "aescbcEncryptionSecret": c.aescbc_encryption_secret,
            "ca": self._pem_to_dict(c.cluster_ca),
            "apiServer": self._component_to_dict(c.api_server),
            "controllerManager": self._component_to_dict(c.controller_manager),
            "scheduler": self._component_to_dict(c.scheduler),
            "etcd": etcd,
            "externalCloudProvider": external,
        })

    def to_yaml(self, config: Config) -> str:
        """Serialize a ``Config`` to a YAML string."""
        return yaml.safe_dump(self.to_dict(config), sort_keys=False, default_flow_style=False)

    # ------------------------------------------------------------------
    # Deserialization (dict → document)
    # ------------------------------------------------------------------

    def from_dict(self, data: dict[str, Any]) -> Config:
        """Deserialize a dict (as produced by ``to_dict``) into a ``Config``.

        Raises
        ------
        DocumentError
            If a value has the wrong type.
        nodeconf.config.endpoint.EndpointParseError
            If the control-plane endpoint is not a valid URL.
        """
        if not isinstance(data, dict):
            raise DocumentError("<root>", f"expected a mapping, got {_type_name(data)}")

        machine = _section(data, "machine", "")
        cluster = _section(data, "cluster", "")
        config = Config(
            version=_str(data, "version", "") or DEFAULT_CONFIG_VERSION,
            machine_config=self._machine_from_dict(machine) if machine is not None else None,
            cluster_config=self._cluster_from_dict(cluster) if cluster is not None else None,
        )
        logger.debug(
            "decoded %s document (machine=%s, cluster=%s)",
            config.version,
            config.machine_config is not None,
            config.cluster_config is not None,
        )
        return config

    def _machine_from_dict(self, d: dict[str, Any]) -> MachineConfig:
        install = _section(d, "install", "machine")
        return MachineConfig(
            type=_str(d, "type", "machine"),
            install=InstallConfig(
                disk=_str(install, "disk", "machine.install"),
                image=_str(install, "image", "machine.install"),
                bootloader=_bool(install, "bootloader", "machine.install"),
                wipe=_bool(install, "wipe", "machine.install"),
                extra_kernel_args=_str_list(install, "extraKernelArgs", "machine.install"),
            )
            if install is not None
            else None,
        )

    def _pem_from_dict(self, d: dict[str, Any] | None, path: str) -> PEMEncodedCertificateAndKey | None:
        if d is None:
            return None
        return PEMEncodedCertificateAndKey(crt=_pem(d, "crt", path), key=_pem(d, "key", path))

    def _cluster_from_dict(self, d: dict[str, Any]) -> ClusterConfig:
        path = "cluster"

        control_plane = None
        cp = _section(d, "controlPlane", path)
        if cp is not None:
            raw_endpoint = cp.get("endpoint")
            control_plane = ControlPlaneConfig(
                version=_str(cp, "version", f"{path}.controlPlane"),
                endpoint=parse_endpoint(raw_endpoint) if raw_endpoint is not None else None,
                local_api_server_port=_int(cp, "localAPIServerPort", f"{path}.controlPlane"),
            )

        network = None
        n = _section(d, "network", path)
        if n is not None:
            network = ClusterNetworkConfig(
                cni=_str(n, "cni", f"{path}.network"),
                dns_domain=_str(n, "dnsDomain", f"{path}.network"),
                pod_subnet=_str_list(n, "podSubnets", f"{path}.network"),
                service_subnet=_str_list(n, "serviceSubnets", f"{path}.network"),
            )

        api_server = None
        a = _section(d, "apiServer", path)
        if a is not None:
            api_server = APIServerConfig(
                image=_str(a, "image", f"{path}.apiServer"),
                extra_args=_str_map(a, "extraArgs", f"{path}.apiServer"),
                cert_sans=_str_list(a, "certSANs", f"{path}.apiServer"),
            )

        controller_manager = None
        cm = _section(d, "controllerManager", path)
        if cm is not None:
            controller_manager = ControllerManagerConfig(
                image=_str(cm, "image", f"{path}.controllerManager"),
                extra_args=_str_map(cm, "extraArgs", f"{path}.controllerManager"),
            )

        scheduler = None
        s = _section(d, "scheduler", path)
        if s is not None:
            scheduler = SchedulerConfig(
                image=_str(s, "image", f"{path}.scheduler"),
                extra_args=_str_map(s, "extraArgs", f"{path}.scheduler"),
            )

        etcd = None
        e = _section(d, "etcd", path)
        if e is not None:
            etcd = EtcdConfig(
                image=_str(e, "image", f"{path}.etcd"),
                root_ca=self._pem_from_dict(_section(e, "ca", f"{path}.etcd"), f"{path}.etcd.ca"),
            )

        external = None
        x = _section(d, "externalCloudProvider", path)
        if x is not None:
            external = ExternalCloudProviderConfig(
                enabled=_bool(x, "enabled", f"{path}.externalCloudProvider"),
                manifests=_str_list(x, "manifests", f"{path}.externalCloudProvider"),
            )

        return ClusterConfig(
            control_plane=control_plane,
            cluster_name=_str(d, "clusterName", path),
            cluster_network=network,
            bootstrap_token=_str(d, "token", path),
            certificate_key=_str(d, "certificateKey", path),
            aescbc_encryption_secret=_str(d, "aescbcEncryptionSecret", path),
            cluster_ca=self._pem_from_dict(_section(d, "ca", path), f"{path}.ca"),
            api_server=api_server,
            controller_manager=controller_manager,
            scheduler=scheduler,
            etcd_config=etcd,
            external_cloud_provider_config=external,
        )

    def from_yaml(self, text: str) -> Config:
        """Deserialize a YAML string into a ``Config``.

        Raises
        ------
        DocumentError
            If the YAML is malformed or has the wrong structure.
        """
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise DocumentError("<root>", f"invalid YAML: {exc}") from exc
        return self.from_dict(data or {})
