"""Example registry: annotation parsing, deploy plans and discovery."""

from fhevm_hub.registry.builder import RegistryBuilder, build_registry
from fhevm_hub.registry.deploy_plan import parse_deploy_plan, render_deploy_arg
from fhevm_hub.registry.models import (
    DeployArg,
    DeployStep,
    Difficulty,
    ExampleRecord,
    Registry,
)
from fhevm_hub.registry.validation import TagReport, TagViolation, validate_contract_tags

__all__ = [
    "DeployArg",
    "DeployStep",
    "Difficulty",
    "ExampleRecord",
    "Registry",
    "RegistryBuilder",
    "TagReport",
    "TagViolation",
    "build_registry",
    "parse_deploy_plan",
    "render_deploy_arg",
    "validate_contract_tags",
]
