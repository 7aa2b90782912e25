#!/usr/bin/env python3
"""
Brownie-backed deployment context.

Works both inside `brownie run` (project loaded and network connected by the
runner) and standalone, where the project is loaded and the network connected
from settings.
"""

import logging
from typing import Any, Dict, Optional

from .context import ContractFactory, DeploymentContext, PendingDeployment, TxOptions
from .errors import ArtifactNotFoundError, ConfigurationError, ConfirmationError

logger = logging.getLogger(__name__)


class BrownieDeployment(PendingDeployment):
    """Pending deployment backed by a brownie TransactionReceipt"""

    def __init__(self, name: str, receipt):
        self.name = name
        self.receipt = receipt
        self.tx_hash = str(receipt.txid)

    @property
    def block_number(self) -> Optional[int]:
        return self.receipt.block_number

    def wait(self, confirmations: int) -> str:
        self.receipt.wait(confirmations)
        if self.receipt.status != 1:
            reason = getattr(self.receipt, 'revert_msg', None) or "transaction reverted"
            raise ConfirmationError(f"{self.name} deployment failed: {reason}", contract=self.name)
        return self.receipt.contract_address


class BrownieContractFactory(ContractFactory):
    """Wraps a brownie ContractContainer"""

    def __init__(self, name: str, container, account, tx_options: TxOptions):
        self.name = name
        self.container = container
        self.account = account
        self.tx_options = tx_options

    def tx_params(self) -> Dict[str, Any]:
        # required_confs=0 returns the pending receipt instead of waiting
        params = {'from': self.account, 'required_confs': 0}
        params.update(self.tx_options.brownie_params())
        return params

    def deploy(self, *args) -> BrownieDeployment:
        # silent keeps brownie's transaction printout off stdout
        result = self.container.deploy(*args, self.tx_params(), silent=True)
        # A ProjectContract (returned once already confirmed) exposes its receipt as .tx
        receipt = getattr(result, 'tx', None) or result
        return BrownieDeployment(self.name, receipt)


class BrownieContext(DeploymentContext):
    """Deployment context on top of a loaded brownie project"""

    def __init__(self, project, account, network_name: str, tx_options: Optional[TxOptions] = None, web3=None):
        self.project = project
        self.account = account
        self.network_name = network_name
        self.deployer_address = str(account)
        self.tx_options = tx_options or TxOptions()
        self.web3 = web3

    @classmethod
    def from_settings(cls, settings) -> "BrownieContext":
        """Reuse the active brownie project and network, or load them from settings"""
        from brownie import accounts, network, project, web3

        loaded = project.get_loaded_projects()
        if loaded:
            active_project = loaded[0]
        else:
            logger.info(f"Loading brownie project from {settings.project_path}")
            active_project = project.load(settings.project_path)

        if not network.is_connected():
            if not settings.network:
                raise ConfigurationError("No brownie network is connected and none is configured")
            logger.info(f"Connecting to brownie network {settings.network}")
            network.connect(settings.network)

        if settings.private_key:
            account = accounts.add(settings.private_key)
        else:
            if settings.account_index >= len(accounts):
                raise ConfigurationError(
                    f"Account index {settings.account_index} is not available ({len(accounts)} accounts loaded)"
                )
            account = accounts[settings.account_index]

        return cls(
            project=active_project,
            account=account,
            network_name=network.show_active(),
            tx_options=TxOptions.from_settings(settings),
            web3=web3,
        )

    def get_contract_factory(self, name: str) -> BrownieContractFactory:
        containers = self.project.dict()
        if name not in containers:
            available = ", ".join(sorted(containers)) or "none"
            raise ArtifactNotFoundError(f"Contract {name} not found in brownie project (available: {available})", contract=name)
        return BrownieContractFactory(name, containers[name], self.account, self.tx_options)

    def block_number(self) -> Optional[int]:
        if self.web3 is None:
            return None
        return self.web3.eth.block_number
