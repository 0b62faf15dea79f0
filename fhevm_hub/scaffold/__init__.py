"""Standalone repository generation from the example registry."""

from fhevm_hub.scaffold.deploy_script import generate_deploy_script
from fhevm_hub.scaffold.deps import apply_dependency_updates, check_dependencies
from fhevm_hub.scaffold.project import (
    ProjectScaffolder,
    ScaffoldResult,
    scaffold_category,
    scaffold_example,
)
from fhevm_hub.scaffold.template import ensure_template_dir

__all__ = [
    "ProjectScaffolder",
    "ScaffoldResult",
    "apply_dependency_updates",
    "check_dependencies",
    "ensure_template_dir",
    "generate_deploy_script",
    "scaffold_category",
    "scaffold_example",
]
