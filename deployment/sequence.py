#!/usr/bin/env python3
"""
Deployment sequence definitions.

A sequence is an ordered list of steps. Each step names a compiled contract and
the earlier steps whose deployed addresses are passed to its constructor.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union

import yaml

from .errors import SequenceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeploymentStep:
    name: str  # Contract name as known to the build toolchain (e.g., "Auction")
    args: Tuple[str, ...] = field(default_factory=tuple)  # Earlier steps whose addresses go to the constructor
    label: Optional[str] = None  # Name printed next to the address

    @property
    def display_name(self) -> str:
        return self.label or self.name


def default_sequence() -> List[DeploymentStep]:
    """Auction and Basket first, then Factory wired to both"""
    return [
        DeploymentStep("Auction"),
        DeploymentStep("Basket"),
        DeploymentStep("Factory", args=("Auction", "Basket")),
    ]


def validate_sequence(steps: List[DeploymentStep]) -> List[DeploymentStep]:
    """Check that every constructor dependency is deployed before it is used"""
    if not steps:
        raise SequenceError("Deployment sequence is empty")

    seen = set()
    for position, step in enumerate(steps, start=1):
        if not step.name:
            raise SequenceError(f"Step {position} has no contract name")
        if step.name in seen:
            raise SequenceError(f"Contract {step.name} appears more than once in the sequence", contract=step.name)
        for dependency in step.args:
            if dependency == step.name:
                raise SequenceError(f"{step.name} cannot depend on itself", contract=step.name)
            if dependency not in seen:
                raise SequenceError(
                    f"{step.name} needs the address of {dependency}, which is not deployed before it",
                    contract=step.name,
                )
        seen.add(step.name)

    return steps


def load_sequence(path: Union[str, Path]) -> List[DeploymentStep]:
    """Load a sequence from YAML.

    Expected layout::

        contracts:
          - name: Auction
          - name: Basket
          - name: Factory
            args: [Auction, Basket]
    """
    with open(path, 'r') as f:
        document = yaml.safe_load(f) or {}

    if not isinstance(document, dict) or not isinstance(document.get('contracts'), list):
        raise SequenceError(f"{path}: expected a 'contracts' list")

    steps = []
    for entry in document['contracts']:
        if isinstance(entry, str):
            entry = {'name': entry}
        if not isinstance(entry, dict) or 'name' not in entry:
            raise SequenceError(f"{path}: every contract entry needs a 'name'")
        args = entry.get('args') or []
        if not isinstance(args, list):
            raise SequenceError(f"{path}: 'args' of {entry['name']} must be a list", contract=entry['name'])
        steps.append(DeploymentStep(
            name=str(entry['name']),
            args=tuple(str(arg) for arg in args),
            label=entry.get('label'),
        ))

    logger.info(f"Loaded {len(steps)} deployment steps from {path}")
    return validate_sequence(steps)
