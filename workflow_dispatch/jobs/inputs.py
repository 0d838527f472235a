"""Decoding helpers for raw invocation inputs."""

from __future__ import annotations

import json
import math

from workflow_dispatch.domain import DispatchInputs, DispatchRequest

from .errors import InputDecodeError


def job_decode_parameters(parameters_json: str) -> dict[str, str]:
    """Decode JSON-encoded workflow inputs into a flat string mapping.

    Args:
        parameters_json: JSON object text. Blank input decodes to an empty mapping.

    Returns:
        dict[str, str]: Flat workflow inputs. Booleans render as `true`/`false`,
        numbers as their JSON text.

    Raises:
        InputDecodeError: Raised for invalid JSON, non-object documents, nested/null values, or non-finite numbers.
    """

    stripped_json = (parameters_json or "").strip()
    if not stripped_json:
        return {}

    try:
        decoded = json.loads(stripped_json)
    except json.JSONDecodeError as error:
        raise InputDecodeError(f"Workflow inputs are not valid JSON: {error}") from error

    if not isinstance(decoded, dict):
        raise InputDecodeError(f"Workflow inputs must be a JSON object, got {type(decoded).__name__}")

    parameters: dict[str, str] = {}
    for key, value in decoded.items():
        if isinstance(value, bool):
            parameters[key] = "true" if value else "false"
        elif isinstance(value, str):
            parameters[key] = value
        elif isinstance(value, float) and not math.isfinite(value):
            raise InputDecodeError(f"Workflow input '{key}' must be a finite number, got {value!r}")
        elif isinstance(value, (int, float)):
            parameters[key] = json.dumps(value)
        else:
            raise InputDecodeError(
                f"Workflow input '{key}' must be a string, number or boolean, got {type(value).__name__}"
            )
    return parameters


def job_build_dispatch_request(inputs: DispatchInputs) -> DispatchRequest:
    """Build the immutable dispatch request from raw invocation inputs.

    Raises:
        InputDecodeError: Raised when workflow inputs cannot be decoded.
    """

    return DispatchRequest(
        owner_scope=inputs.owner_scope,
        definition_ref=inputs.definition_ref,
        revision=inputs.revision,
        parameters=job_decode_parameters(inputs.parameters_json),
    )
