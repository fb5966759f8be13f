"""
Pytest fixtures for cvarkit tests.
"""
from dataclasses import dataclass

import pytest

from cvarkit.demo import DemoVariables, register_demo
from cvarkit.registry import CommandRegistry, RegistryBuilder


@dataclass
class DemoSetup:
    registry: CommandRegistry
    demo: DemoVariables


@pytest.fixture
def builder():
    return RegistryBuilder()


@pytest.fixture
def demo_setup():
    """Frozen registry holding the demo variables and commands."""
    builder = RegistryBuilder()
    demo = register_demo(builder)
    registry = builder.freeze()
    yield DemoSetup(registry=registry, demo=demo)
    registry.close()
