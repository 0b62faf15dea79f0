"""Normalization of ``@custom:deploy-plan`` annotations.

The annotation holds a JSON array of steps::

    [{"contract": "Registry", "saveAs": "reg"},
     {"contract": "Token", "args": ["@reg", 18, "$deployer", "#Date.now()"]}]

String arguments use sigils: ``@name`` references an earlier step (by its
``saveAs`` or contract name), ``$deployer`` is the sending signer and
``#expr`` is passed through to the deploy script verbatim. Anything else is
a string literal; JSON numbers become numeric literals.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from fhevm_hub.kernel.exceptions import DeployPlanError
from fhevm_hub.registry.models import (
    DeployArg,
    DeployArgAdapter,
    DeployStep,
    ExprArg,
    LiteralArg,
    NumberArg,
    RefArg,
    SignerArg,
)

DEPLOYER_PLACEHOLDER = "$deployer"


def normalize_deploy_arg(arg: Any, source_file: Path | None = None) -> DeployArg:
    """Turn one raw JSON argument into a typed deploy argument.

    Raises
    ------
    DeployPlanError
        If the argument is neither a string, a number, a boolean nor a typed mapping
    """
    if isinstance(arg, str):
        if arg.startswith("@"):
            return RefArg(name=arg[1:])
        if arg == DEPLOYER_PLACEHOLDER:
            return SignerArg(name="deployer")
        if arg.startswith("#"):
            return ExprArg(expression=arg[1:])
        return LiteralArg(value=arg)
    if isinstance(arg, bool):
        return LiteralArg(value="true" if arg else "false")
    if isinstance(arg, int | float):
        return NumberArg(value=arg)
    if isinstance(arg, dict):
        try:
            return DeployArgAdapter.validate_python(arg)
        except PydanticValidationError as e:
            raise DeployPlanError(source_file, f"unsupported argument {arg!r}: {e}") from e
    raise DeployPlanError(source_file, f"unsupported argument {arg!r}")


def render_deploy_arg(arg: DeployArg) -> str:
    """Render an argument in its authored sigil form: ``@f``, ``$deployer``, ``#expr``, ``"x"``."""
    match arg:
        case RefArg(name=name):
            return f"@{name}"
        case SignerArg(name=name):
            return f"${name}"
        case ExprArg(expression=expression):
            return f"#{expression}"
        case LiteralArg(value=value):
            return json.dumps(value, ensure_ascii=False)
        case NumberArg(value=value):
            return str(value)
    raise TypeError(f"Unknown deploy argument: {arg!r}")


def validate_references(plan: list[DeployStep], source_file: Path | None = None) -> None:
    """Ensure every ``@ref`` names a step that comes earlier in the plan.

    Raises
    ------
    DeployPlanError
        On a forward or unknown reference
    """
    known: set[str] = set()
    for index, step in enumerate(plan, start=1):
        for arg in step.args or []:
            if isinstance(arg, RefArg) and arg.name not in known:
                raise DeployPlanError(
                    source_file,
                    f"step {index} ({step.contract}) references '@{arg.name}' "
                    "which is not deployed by an earlier step",
                )
        contract = step.contract.removesuffix(".sol")
        known.update({step.contract, contract})
        if step.save_as:
            known.add(step.save_as)


def parse_deploy_plan(raw: str | None, source_file: Path | None = None) -> list[DeployStep] | None:
    """Parse and validate a deploy-plan annotation value.

    Parameters
    ----------
    raw : str | None
        Annotation value; None or empty means "no plan"
    source_file : Path | None
        Contract carrying the annotation, used in error messages

    Returns
    -------
    list[DeployStep] | None
        Normalized steps, or None when there is no annotation

    Raises
    ------
    DeployPlanError
        On malformed JSON, a non-array document, a step without ``contract``,
        an unsupported argument or a forward reference
    """
    if not raw:
        return None

    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        raise DeployPlanError(source_file, str(e)) from e

    if not isinstance(parsed, list):
        raise DeployPlanError(source_file, "deploy plan must be an array")

    plan: list[DeployStep] = []
    for index, raw_step in enumerate(parsed, start=1):
        if not isinstance(raw_step, dict) or not isinstance(raw_step.get("contract"), str):
            raise DeployPlanError(source_file, f"step {index} must be an object with a 'contract'")
        raw_args = raw_step.get("args")
        args = (
            [normalize_deploy_arg(arg, source_file) for arg in raw_args]
            if isinstance(raw_args, list)
            else None
        )
        try:
            plan.append(
                DeployStep(
                    contract=raw_step["contract"],
                    args=args,
                    save_as=raw_step.get("saveAs"),
                    after_deploy=raw_step.get("afterDeploy") or [],
                )
            )
        except PydanticValidationError as e:
            raise DeployPlanError(source_file, f"step {index}: {e}") from e

    validate_references(plan, source_file)
    return plan
