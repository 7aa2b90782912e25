#!/usr/bin/env python3
"""
Pytest configuration and in-memory stand-ins for a blockchain framework
"""

import pytest

from deployment.context import ContractFactory, DeploymentContext, PendingDeployment


class FakePending(PendingDeployment):

    def __init__(self, chain, name, args, address, fail_confirm=None):
        self.chain = chain
        self.name = name
        self.args = args
        self.address = address
        self.fail_confirm = fail_confirm
        self.tx_hash = f"0xtx{name.lower()}"

    @property
    def block_number(self):
        return self.chain.block

    def wait(self, confirmations):
        self.chain.events.append(("wait", self.name, confirmations))
        if self.fail_confirm is not None:
            raise self.fail_confirm
        self.chain.block += 1
        self.chain.confirmed.append(self.name)
        self.chain.events.append(("confirmed", self.name))
        return self.address


class FakeFactory(ContractFactory):

    def __init__(self, chain, name):
        self.chain = chain
        self.name = name

    def deploy(self, *args):
        self.chain.events.append(("submit", self.name, args))
        if self.name in self.chain.fail_submit:
            raise self.chain.fail_submit[self.name]
        self.chain.constructor_args[self.name] = args
        return FakePending(
            self.chain,
            self.name,
            args,
            self.chain.next_address(),
            fail_confirm=self.chain.fail_confirm.get(self.name),
        )


class FakeChain(DeploymentContext):
    """Context whose deployments confirm instantly with sequential addresses"""

    def __init__(self, artifacts=("Auction", "Basket", "Factory"), start=1):
        self.network_name = "fake"
        self.deployer_address = "0xdeployer"
        self.artifacts = set(artifacts)
        self.counter = start
        self.block = 100
        self.events = []
        self.confirmed = []
        self.constructor_args = {}
        self.fail_submit = {}
        self.fail_confirm = {}

    def next_address(self):
        address = hex(self.counter)
        self.counter += 1
        return address

    def get_contract_factory(self, name):
        self.events.append(("resolve", name))
        if name not in self.artifacts:
            raise KeyError(f"artifact {name} not compiled")
        return FakeFactory(self, name)

    def block_number(self):
        return self.block

    def submitted(self):
        return [event[1] for event in self.events if event[0] == "submit"]


@pytest.fixture
def chain():
    """Fresh fake chain per test"""
    return FakeChain()
