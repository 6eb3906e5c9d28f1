"""
Deployer — Build a strategy from settings and record the deployment.
"""

import json
from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, Field

from flashcollateral.chain import Ledger
from flashcollateral.deploy.networks import DeploymentSettings
from flashcollateral.observability import get_logger
from flashcollateral.strategy import FlashCollateralStrategy, StrategyConfig


logger = get_logger("deploy.deployer")


class DeploymentRecord(BaseModel):
    """What was deployed, where, and with which constructor arguments."""
    network: str
    chain_id: int
    address: str
    deployer: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    constructor: dict[str, str] = Field(default_factory=dict)

    @property
    def filename(self) -> str:
        return f"{self.network}_{self.chain_id}.json"


def deploy_strategy(
    ledger: Ledger,
    settings: DeploymentSettings,
) -> tuple[FlashCollateralStrategy, DeploymentRecord]:
    """
    Deploy a strategy on ``ledger`` using ``settings``.

    Raises:
        InvalidAddress: a configured address is null or malformed
    """
    config = StrategyConfig(
        protocol_address=settings.pool_address,
        collateral_asset=settings.collateral_asset,
        borrow_asset=settings.borrow_asset,
        owner=settings.owner,
    )
    strategy = FlashCollateralStrategy(ledger, config)

    record = DeploymentRecord(
        network=settings.network,
        chain_id=settings.chain_id,
        address=strategy.address,
        deployer=config.owner,
        constructor={
            "pool": config.protocol_address,
            "flashLoanAsset": config.collateral_asset,
            "borrowAsset": config.borrow_asset,
            "owner": config.owner,
        },
    )
    logger.info(f"Deployed strategy to {strategy.address} on {settings.network}")
    return strategy, record


def write_deployment_record(record: DeploymentRecord, directory: Path | str) -> Path:
    """Write ``<network>_<chainId>.json`` under ``directory``, creating it if needed."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    path = directory / record.filename
    path.write_text(json.dumps(record.model_dump(mode="json"), indent=2))
    logger.info(f"Deployment info saved to {path}")
    return path


def read_deployment_record(path: Path | str) -> DeploymentRecord:
    """Load a record written by ``write_deployment_record``."""
    return DeploymentRecord.model_validate_json(Path(path).read_text())
