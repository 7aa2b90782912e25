#!/usr/bin/env python3
"""
Deploy Auction, Basket and Factory with the brownie runner:

    brownie run scripts/deploy.py --network development

Brownie has already loaded the project and connected the network; gas and
confirmation settings come from DEPLOY_* environment variables.
"""

import sys

from deployment.cli import deploy, setup_logging
from deployment.config import Backend, get_settings, validate_settings


def main():
    """Main deployment function"""
    settings = get_settings().model_copy(update={'backend': Backend.BROWNIE})
    settings = validate_settings(settings)
    setup_logging(settings.log_level)

    status = deploy(settings)
    if status != 0:
        sys.exit(status)
