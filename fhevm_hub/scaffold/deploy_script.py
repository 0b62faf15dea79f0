"""``scripts/deploy.ts`` generation from an example's deploy plan."""

from __future__ import annotations

import json
from dataclasses import dataclass

from jinja2 import Environment

from fhevm_hub.kernel.text import lower_camel
from fhevm_hub.registry.models import (
    DeployArg,
    DeployStep,
    ExprArg,
    LiteralArg,
    NumberArg,
    RefArg,
    SignerArg,
)

# autoescape=False: the output is TypeScript, not HTML
_ENV = Environment(autoescape=False, keep_trailing_newline=True, trim_blocks=True)  # nosec B701

DEPLOY_TEMPLATE = _ENV.from_string(
    """import hre from "hardhat";

async function main() {
  const [deployer] = await hre.ethers.getSigners();
{% for step in steps %}

  const {{ step.factory }} = await hre.ethers.getContractFactory("{{ step.contract }}");
  const {{ step.variable }} = await {{ step.factory }}.deploy({{ step.args | join(", ") }});
  await {{ step.variable }}.waitForDeployment();

  console.log("{{ step.contract }} deployed to:", await {{ step.variable }}.getAddress());
{% if step.after_deploy %}

{% for line in step.after_deploy %}
  {{ line }}
{% endfor %}
{% endif %}
{% endfor %}
}

main().catch((error) => {
  console.error(error);
  process.exit(1);
});
"""
)


@dataclass(frozen=True, slots=True)
class RenderedStep:
    contract: str
    variable: str
    factory: str
    args: list[str]
    after_deploy: list[str]


def contract_base(contract: str) -> str:
    return contract.removesuffix(".sol")


def default_plan(contract_file_name: str) -> list[DeployStep]:
    """Single step deploying the primary contract with no arguments."""
    return [DeployStep(contract=contract_base(contract_file_name))]


def render_arg(arg: DeployArg, variables: dict[str, str]) -> str:
    """TypeScript expression for one constructor argument."""
    match arg:
        case RefArg(name=name):
            variable = variables.get(name) or variables.get(contract_base(name)) or name
            return f"await {variable}.getAddress()"
        case SignerArg(name=name):
            return f"{name}.address"
        case LiteralArg(value=value):
            return json.dumps(value, ensure_ascii=False)
        case NumberArg(value=value):
            return str(value)
        case ExprArg(expression=expression):
            return expression
    raise TypeError(f"Unknown deploy argument: {arg!r}")


def generate_deploy_script(contract_file_name: str, plan: list[DeployStep] | None) -> str:
    """Render ``scripts/deploy.ts``.

    Each step deploys through a contract factory into a local variable named
    by ``saveAs`` or the lower-camel-cased contract name; ``@ref`` arguments
    read the address of an earlier step's variable.

    Parameters
    ----------
    contract_file_name : str
        Primary contract file name, used when there is no plan
    plan : list[DeployStep] | None
        Normalized deploy plan

    Returns
    -------
    str
        TypeScript source
    """
    steps = plan or default_plan(contract_file_name)
    variables: dict[str, str] = {}
    rendered: list[RenderedStep] = []
    for step in steps:
        contract = contract_base(step.contract)
        variable = step.save_as or lower_camel(contract)
        rendered.append(
            RenderedStep(
                contract=contract,
                variable=variable,
                factory=f"{variable}Factory",
                args=[render_arg(arg, variables) for arg in step.args or []],
                after_deploy=list(step.after_deploy),
            )
        )
        variables.update({step.contract: variable, contract: variable})
        if step.save_as:
            variables[step.save_as] = variable
    return DEPLOY_TEMPLATE.render(steps=rendered)
