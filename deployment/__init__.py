"""
Deployment tooling for the Auction, Basket and Factory contracts.
"""

from .errors import (
    ArtifactNotFoundError,
    ConfigurationError,
    ConfirmationError,
    DeploymentError,
    SequenceError,
    SubmissionError,
)
from .orchestrator import DeploymentOrchestrator, DeploymentResult, DeployedContract, DeploymentStatus, run_deployment
from .sequence import DeploymentStep, default_sequence, load_sequence, validate_sequence

__all__ = [
    "ArtifactNotFoundError",
    "ConfigurationError",
    "ConfirmationError",
    "DeploymentError",
    "SequenceError",
    "SubmissionError",
    "DeploymentOrchestrator",
    "DeploymentResult",
    "DeployedContract",
    "DeploymentStatus",
    "run_deployment",
    "DeploymentStep",
    "default_sequence",
    "load_sequence",
    "validate_sequence",
]
