#!/usr/bin/env python3
"""
Deployment record file and console summary.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

from rich.console import Console
from rich.table import Table

from .orchestrator import DeploymentResult

logger = logging.getLogger(__name__)

# stdout is reserved for the address lines
console = Console(stderr=True)


def build_record(result: DeploymentResult, block_number: Optional[int] = None) -> Dict[str, Any]:
    """Collect deployment data in the layout consumed by follow-up scripts"""
    record: Dict[str, Any] = {
        'network': result.network,
        'deployer': result.deployer,
        'block_number': block_number,
        'deployed_at': datetime.now(timezone.utc).isoformat(),
        'contracts': [contract.to_dict() for contract in result.contracts],
    }
    for contract in result.contracts:
        record[f"{contract.name.lower()}_address"] = contract.address
    return record


def save_record(record: Dict[str, Any], path: Union[str, Path]) -> Path:
    path = Path(path)
    if path.parent != Path('.'):
        path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(record, f, indent=2, default=str)
    logger.info(f"📄 Saved deployment record: {path}")
    return path


def load_record(path: Union[str, Path]) -> Dict[str, Any]:
    with open(path, 'r') as f:
        return json.load(f)


def display_summary(result: DeploymentResult, out: Optional[Console] = None) -> None:
    """Display a summary of the deployment"""
    out = out or console

    table = Table(title=f"📊 Deployment Summary ({result.network})")
    table.add_column("Contract", style="cyan")
    table.add_column("Address", style="green")
    table.add_column("Transaction", style="yellow")
    table.add_column("Constructor Args", style="magenta")

    for contract in result.contracts:
        table.add_row(
            contract.label,
            contract.address,
            contract.tx_hash or "-",
            ", ".join(contract.args) or "-",
        )

    out.print(table)
    if result.deployer:
        out.print(f"Deployer: [yellow]{result.deployer}[/yellow]")
