#!/usr/bin/env python3
"""
Sequential contract deployment.

Steps run strictly in order. A step is resolved, submitted and confirmed before
the next one starts, so a contract that takes earlier addresses as constructor
arguments only ever sees confirmed addresses. The first failure aborts the run;
nothing is retried or rolled back.
"""

import logging
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, TextIO, Tuple

from .context import DeploymentContext
from .errors import (
    ArtifactNotFoundError,
    ConfigurationError,
    ConfirmationError,
    DeploymentError,
    SubmissionError,
)
from .sequence import DeploymentStep, default_sequence, validate_sequence

logger = logging.getLogger(__name__)


class DeploymentStatus(str, Enum):
    """Lifecycle of a deployment run"""
    PENDING = "pending"
    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"


class StepPhase(str, Enum):
    """Lifecycle of a single step"""
    RESOLVING = "resolving"
    SUBMITTED = "submitted"
    CONFIRMED = "confirmed"
    FAILED = "failed"


@dataclass
class DeployedContract:
    name: str
    label: str
    address: str
    tx_hash: Optional[str] = None
    args: Tuple[str, ...] = field(default_factory=tuple)
    block_number: Optional[int] = None

    def to_dict(self) -> Dict:
        return {
            'name': self.name,
            'label': self.label,
            'address': self.address,
            'tx_hash': self.tx_hash,
            'constructor_args': list(self.args),
            'block_number': self.block_number,
        }


@dataclass
class DeploymentResult:
    contracts: List[DeployedContract]
    network: str
    deployer: Optional[str] = None
    status: DeploymentStatus = DeploymentStatus.DONE

    def address_of(self, name: str) -> str:
        for contract in self.contracts:
            if contract.name == name:
                return contract.address
        raise KeyError(name)

    def lines(self) -> List[str]:
        return [f"{contract.label}: {contract.address}" for contract in self.contracts]


class DeploymentOrchestrator:
    """Deploys a sequence of contracts through an injected context"""

    def __init__(
        self,
        context: DeploymentContext,
        steps: Optional[Iterable[DeploymentStep]] = None,
        confirmations: int = 1,
    ):
        if confirmations < 1:
            raise ConfigurationError(f"Required confirmations must be at least 1, got {confirmations}")

        self.context = context
        self.steps = validate_sequence(list(steps) if steps is not None else default_sequence())
        self.confirmations = confirmations

        self.status = DeploymentStatus.PENDING
        self.current_step: Optional[DeploymentStep] = None
        self.deployed: Dict[str, DeployedContract] = {}
        self.transitions: List[Tuple[str, StepPhase]] = []

    def run(self) -> DeploymentResult:
        """Deploy every step in order and return the confirmed addresses"""
        if self.status != DeploymentStatus.PENDING:
            raise DeploymentError(f"Deployment already {self.status.value}")

        self.status = DeploymentStatus.RUNNING
        logger.info(
            f"Deploying {len(self.steps)} contracts to {self.context.network_name} "
            f"(confirmations: {self.confirmations})"
        )

        try:
            for step in self.steps:
                self.current_step = step
                self.deployed[step.name] = self._deploy_step(step)
        except DeploymentError as e:
            self.status = DeploymentStatus.FAILED
            if self.current_step is not None:
                self._transition(self.current_step, StepPhase.FAILED)
            e.deployed = self.deployed_addresses()
            if e.deployed:
                orphaned = ", ".join(f"{name} at {address}" for name, address in e.deployed.items())
                logger.warning(f"Deployment aborted; already deployed contracts remain on-chain: {orphaned}")
            raise

        self.status = DeploymentStatus.DONE
        self.current_step = None
        return DeploymentResult(
            contracts=list(self.deployed.values()),
            network=self.context.network_name,
            deployer=self.context.deployer_address,
        )

    def deployed_addresses(self) -> Dict[str, str]:
        return {name: contract.address for name, contract in self.deployed.items()}

    def _deploy_step(self, step: DeploymentStep) -> DeployedContract:
        self._transition(step, StepPhase.RESOLVING)
        try:
            factory = self.context.get_contract_factory(step.name)
        except DeploymentError:
            raise
        except Exception as e:
            raise ArtifactNotFoundError(f"Could not resolve contract factory for {step.name}: {e}", contract=step.name) from e

        args = tuple(self.deployed[dependency].address for dependency in step.args)
        if args:
            logger.info(f"Deploying {step.name} with constructor args {', '.join(args)}")
        else:
            logger.info(f"Deploying {step.name}")

        try:
            pending = factory.deploy(*args)
        except DeploymentError:
            raise
        except Exception as e:
            raise SubmissionError(f"Failed to submit {step.name} deployment: {e}", contract=step.name) from e
        self._transition(step, StepPhase.SUBMITTED)
        if pending.tx_hash:
            logger.info(f"{step.name} deployment submitted: {pending.tx_hash}")

        try:
            address = pending.wait(self.confirmations)
        except DeploymentError:
            raise
        except Exception as e:
            raise ConfirmationError(f"{step.name} deployment was not confirmed: {e}", contract=step.name) from e
        if not address:
            raise ConfirmationError(f"{step.name} deployment confirmed without a contract address", contract=step.name)
        self._transition(step, StepPhase.CONFIRMED)
        logger.info(f"✅ {step.name} deployed at {address}")

        return DeployedContract(
            name=step.name,
            label=step.display_name,
            address=address,
            tx_hash=pending.tx_hash,
            args=args,
            block_number=pending.block_number,
        )

    def _transition(self, step: DeploymentStep, phase: StepPhase) -> None:
        self.transitions.append((step.name, phase))
        logger.debug(f"{step.name}: {phase.value}")


def run_deployment(
    context: DeploymentContext,
    steps: Optional[Iterable[DeploymentStep]] = None,
    confirmations: int = 1,
    stream: Optional[TextIO] = None,
) -> DeploymentResult:
    """Deploy the sequence and print one `<Name>: <address>` line per contract.

    Nothing is printed unless every step is confirmed.
    """
    orchestrator = DeploymentOrchestrator(context, steps=steps, confirmations=confirmations)
    result = orchestrator.run()

    out = stream if stream is not None else sys.stdout
    for line in result.lines():
        print(line, file=out)
    return result
