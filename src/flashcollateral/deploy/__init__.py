"""
Deploy — Network presets, settings resolution, and deployment records.
"""

from flashcollateral.deploy.networks import (
    NetworkPreset,
    NETWORK_PRESETS,
    CHAIN_IDS,
    LOCAL_CHAIN_ID,
    DeploymentSettings,
    resolve_network,
    load_deployment_settings,
)
from flashcollateral.deploy.deployer import (
    DeploymentRecord,
    deploy_strategy,
    write_deployment_record,
    read_deployment_record,
)

__all__ = [
    # Networks
    "NetworkPreset",
    "NETWORK_PRESETS",
    "CHAIN_IDS",
    "LOCAL_CHAIN_ID",
    "DeploymentSettings",
    "resolve_network",
    "load_deployment_settings",
    # Deployer
    "DeploymentRecord",
    "deploy_strategy",
    "write_deployment_record",
    "read_deployment_record",
]
