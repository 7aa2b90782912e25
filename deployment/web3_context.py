#!/usr/bin/env python3
"""
Web3.py-backed deployment context.

Reads compiled artifacts (brownie `build/contracts/*.json` or any JSON with
`abi` and `bytecode`) and deploys them through a JSON-RPC node, signing either
with a local private key or with an account managed by the node.
"""

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Optional

from web3 import Web3
from web3.exceptions import TimeExhausted, TransactionNotFound

from .context import ContractFactory, DeploymentContext, PendingDeployment, TxOptions
from .errors import ArtifactNotFoundError, ConfigurationError, ConfirmationError

logger = logging.getLogger(__name__)


def load_artifact(build_dir: Path, name: str) -> Dict[str, Any]:
    """Load ABI and bytecode for a compiled contract"""
    path = Path(build_dir) / f"{name}.json"
    if not path.exists():
        raise ArtifactNotFoundError(f"No compiled artifact for {name} at {path}", contract=name)

    with open(path, 'r') as f:
        data = json.load(f)

    if not isinstance(data, dict) or 'abi' not in data:
        raise ArtifactNotFoundError(f"Invalid artifact format for {name}: missing 'abi'", contract=name)
    bytecode = data.get('bytecode')
    if isinstance(bytecode, dict):
        # solc standard JSON output nests the hex under 'object'
        bytecode = bytecode.get('object')
    if not bytecode:
        raise ArtifactNotFoundError(f"Artifact for {name} has no bytecode (abstract contract or interface?)", contract=name)

    if not bytecode.startswith('0x'):
        bytecode = '0x' + bytecode
    return {'abi': data['abi'], 'bytecode': bytecode}


class Web3Deployment(PendingDeployment):
    """Pending deployment identified by its transaction hash"""

    def __init__(self, w3: Web3, name: str, tx_hash, receipt_timeout: float, poll_interval: float):
        self.w3 = w3
        self.name = name
        self.tx_hash = Web3.to_hex(tx_hash)
        self.receipt_timeout = receipt_timeout
        self.poll_interval = poll_interval
        self._block_number: Optional[int] = None

    @property
    def block_number(self) -> Optional[int]:
        return self._block_number

    def wait(self, confirmations: int) -> str:
        try:
            receipt = self.w3.eth.wait_for_transaction_receipt(
                self.tx_hash, timeout=self.receipt_timeout, poll_latency=self.poll_interval
            )
        except TimeExhausted as e:
            raise ConfirmationError(
                f"{self.name} deployment {self.tx_hash} not mined within {self.receipt_timeout}s", contract=self.name
            ) from e

        if receipt['status'] != 1:
            raise ConfirmationError(f"{self.name} deployment {self.tx_hash} reverted", contract=self.name)

        mined_block = receipt['blockNumber']
        target_block = mined_block + confirmations - 1
        while self.w3.eth.block_number < target_block:
            time.sleep(self.poll_interval)

        if confirmations > 1:
            # Receipt disappears if the transaction was reorganised out while waiting
            try:
                receipt = self.w3.eth.get_transaction_receipt(self.tx_hash)
            except TransactionNotFound as e:
                raise ConfirmationError(f"{self.name} deployment {self.tx_hash} was dropped", contract=self.name) from e

        self._block_number = receipt['blockNumber']
        address = receipt['contractAddress']
        return Web3.to_checksum_address(address) if address else address


class Web3ContractFactory(ContractFactory):
    """Deploys one compiled artifact"""

    def __init__(self, context: "Web3Context", name: str, artifact: Dict[str, Any]):
        self.context = context
        self.name = name
        self.contract = context.w3.eth.contract(abi=artifact['abi'], bytecode=artifact['bytecode'])

    def deploy(self, *args) -> Web3Deployment:
        w3 = self.context.w3
        constructor = self.contract.constructor(*args)
        tx: Dict[str, Any] = {'from': self.context.deployer_address}
        tx.update(self.context.tx_options.web3_params())

        if self.context.local_account is not None:
            tx['nonce'] = w3.eth.get_transaction_count(self.context.deployer_address, 'pending')
            signed = self.context.local_account.sign_transaction(constructor.build_transaction(tx))
            tx_hash = w3.eth.send_raw_transaction(signed.raw_transaction)
        else:
            tx_hash = constructor.transact(tx)

        return Web3Deployment(w3, self.name, tx_hash, self.context.receipt_timeout, self.context.poll_interval)


class Web3Context(DeploymentContext):
    """Deployment context on a plain JSON-RPC node"""

    def __init__(
        self,
        w3: Web3,
        build_dir: str = "build/contracts",
        private_key: Optional[str] = None,
        account_index: int = 0,
        tx_options: Optional[TxOptions] = None,
        receipt_timeout: float = 120.0,
        poll_interval: float = 1.0,
        network_name: Optional[str] = None,
    ):
        self.w3 = w3
        self.build_dir = Path(build_dir)
        self.tx_options = tx_options or TxOptions()
        self.receipt_timeout = receipt_timeout
        self.poll_interval = poll_interval
        self.network_name = network_name or f"chain {w3.eth.chain_id}"

        if private_key:
            self.local_account = w3.eth.account.from_key(private_key)
            self.deployer_address = self.local_account.address
        else:
            self.local_account = None
            node_accounts = w3.eth.accounts
            if account_index >= len(node_accounts):
                raise ConfigurationError(
                    f"Node exposes {len(node_accounts)} accounts, account index {account_index} is not available; "
                    "configure a private key instead"
                )
            self.deployer_address = node_accounts[account_index]

    @classmethod
    def from_settings(cls, settings) -> "Web3Context":
        """Connect to the configured RPC node"""
        w3 = Web3(Web3.HTTPProvider(settings.rpc_url))
        if not w3.is_connected():
            raise ConfigurationError(f"Failed to connect to {settings.rpc_url}")

        latest_block = w3.eth.get_block('latest')
        logger.info(f"[{latest_block['number']}] Connected to {settings.rpc_url} (chain_id: {w3.eth.chain_id})")

        return cls(
            w3,
            build_dir=settings.build_dir,
            private_key=settings.private_key,
            account_index=settings.account_index,
            tx_options=TxOptions.from_settings(settings),
            receipt_timeout=settings.receipt_timeout,
            poll_interval=settings.poll_interval,
            network_name=settings.network,
        )

    def get_contract_factory(self, name: str) -> Web3ContractFactory:
        artifact = load_artifact(self.build_dir, name)
        return Web3ContractFactory(self, name, artifact)

    def block_number(self) -> Optional[int]:
        return self.w3.eth.block_number
