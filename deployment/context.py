#!/usr/bin/env python3
"""
Interfaces between the orchestrator and a blockchain framework.

A context replaces the framework's ambient runtime environment: it is built
once, handed to the orchestrator, and provides contract factory resolution,
the signer and network access.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class TxOptions:
    """Gas and fee settings passed through to deployment transactions.

    Unset values are left to the framework. Nothing here is estimated.
    """
    gas_limit: Optional[int] = None
    gas_price: Optional[int] = None
    max_fee: Optional[int] = None
    priority_fee: Optional[int] = None

    @classmethod
    def from_settings(cls, settings) -> "TxOptions":
        return cls(
            gas_limit=settings.gas_limit,
            gas_price=settings.gas_price,
            max_fee=settings.max_fee,
            priority_fee=settings.priority_fee,
        )

    def brownie_params(self) -> Dict[str, Any]:
        params = {
            'gas_limit': self.gas_limit,
            'gas_price': self.gas_price,
            'max_fee': self.max_fee,
            'priority_fee': self.priority_fee,
        }
        return {key: value for key, value in params.items() if value is not None}

    def web3_params(self) -> Dict[str, Any]:
        params = {
            'gas': self.gas_limit,
            'gasPrice': self.gas_price,
            'maxFeePerGas': self.max_fee,
            'maxPriorityFeePerGas': self.priority_fee,
        }
        return {key: value for key, value in params.items() if value is not None}


class PendingDeployment(ABC):
    """A submitted deployment transaction"""

    tx_hash: Optional[str] = None

    @abstractmethod
    def wait(self, confirmations: int) -> str:
        """Block until the transaction has `confirmations` confirmations and return the contract address"""

    @property
    def block_number(self) -> Optional[int]:
        return None


class ContractFactory(ABC):
    """Knows how to submit the deployment transaction of one compiled contract"""

    name: str

    @abstractmethod
    def deploy(self, *args) -> PendingDeployment:
        """Submit the deployment transaction without waiting for it"""


class DeploymentContext(ABC):
    """Framework runtime handed to the orchestrator"""

    network_name: str = "unknown"
    deployer_address: Optional[str] = None

    @abstractmethod
    def get_contract_factory(self, name: str) -> ContractFactory:
        """Resolve a compiled contract by name"""

    def block_number(self) -> Optional[int]:
        return None
