#!/usr/bin/env python3
"""
Exceptions raised while deploying contracts.
"""

from typing import Dict, Optional


class DeploymentError(Exception):
    """Base class for every deployment failure"""

    def __init__(self, message: str, contract: Optional[str] = None, deployed: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.contract = contract
        # Contracts already confirmed when the failure happened. They stay on-chain.
        self.deployed = dict(deployed or {})


class ArtifactNotFoundError(DeploymentError):
    """Contract factory could not be resolved (artifact missing or not compiled)"""


class SubmissionError(DeploymentError):
    """Deployment transaction could not be submitted (network or signer error)"""


class ConfirmationError(DeploymentError):
    """Deployment transaction reverted, was dropped, or never confirmed"""


class SequenceError(DeploymentError):
    """Deployment sequence is malformed"""


class ConfigurationError(DeploymentError):
    """Settings are missing or inconsistent"""
