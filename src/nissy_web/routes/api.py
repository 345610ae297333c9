"""Solver API: each route maps a JSON body to one nissy invocation."""

from __future__ import annotations

import re
from typing import Any

from fastapi import APIRouter, Depends, Request

from ..config import Settings
from ..deps import get_runner, get_settings, json_body
from ..errors import MethodNotAllowedError, MissingFieldError, NotFoundError
from ..models import (
    MoveSequenceRequest,
    ResultResponse,
    ScrambleRequest,
    SolveRequest,
    StepsResponse,
)
from ..nissy import NissyRunner, parse_steps
from ..sanitize import sanitize

router = APIRouter(prefix="/api", tags=["api"])

_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")
_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _is_set(value: Any) -> bool:
    """Only null, false, 0 and "" count as unset; empty lists and objects are set."""
    return value is not None and value is not False and value != 0 and value != ""


def _parse_count(value: Any) -> int:
    """Read a leading integer from ``value``; unparsable or zero counts are 1."""
    match = _LEADING_INT.match(str(value))
    count = int(match.group(1)) if match else 0
    return count or 1


async def _run_on_scramble(command: str, payload: dict[str, Any], runner: NissyRunner) -> ResultResponse:
    body = MoveSequenceRequest.model_validate(payload)
    scramble = sanitize(body.scramble)
    if not scramble:
        raise MissingFieldError("scramble")
    return ResultResponse(result=await runner.run([command, scramble]))


@router.get("/steps", response_model=StepsResponse)
async def list_steps(
    runner: NissyRunner = Depends(get_runner),
    settings: Settings = Depends(get_settings),
) -> StepsResponse:
    """List the solver steps this deployment can run."""
    output = await runner.run(["steps"])
    return StepsResponse(steps=parse_steps(output, settings.nissy_skip_steps))


@router.post("/solve", response_model=ResultResponse)
async def solve(
    payload: dict[str, Any] = Depends(json_body),
    runner: NissyRunner = Depends(get_runner),
) -> ResultResponse:
    """Solve ``scramble`` for ``step``, passing extra ``options`` through."""
    body = SolveRequest.model_validate(payload)
    step = sanitize(body.step)
    scramble = sanitize(body.scramble)
    if not step or not scramble:
        raise MissingFieldError("step", "scramble")

    args = ["solve", step]
    if _is_set(body.options):
        options = sanitize(body.options)
        if options:
            args.extend(options.split())
    args.append(scramble)
    return ResultResponse(result=await runner.run(args))


@router.post("/scramble", response_model=ResultResponse)
async def scramble(
    payload: dict[str, Any] = Depends(json_body),
    runner: NissyRunner = Depends(get_runner),
) -> ResultResponse:
    """Generate random scrambles, optionally of a given type."""
    body = ScrambleRequest.model_validate(payload)
    args = ["scramble"]
    if _is_set(body.type):
        scramble_type = sanitize(body.type)
        if scramble_type:
            args.append(scramble_type)
    if _is_set(body.count):
        args.extend(["-n", str(_parse_count(body.count))])
    return ResultResponse(result=await runner.run(args))


@router.post("/invert", response_model=ResultResponse)
async def invert(
    payload: dict[str, Any] = Depends(json_body),
    runner: NissyRunner = Depends(get_runner),
) -> ResultResponse:
    return await _run_on_scramble("invert", payload, runner)


@router.post("/print", response_model=ResultResponse)
async def print_cube(
    payload: dict[str, Any] = Depends(json_body),
    runner: NissyRunner = Depends(get_runner),
) -> ResultResponse:
    """Print the cube state reached by a scramble."""
    return await _run_on_scramble("print", payload, runner)


@router.post("/cleanup", response_model=ResultResponse)
async def cleanup(
    payload: dict[str, Any] = Depends(json_body),
    runner: NissyRunner = Depends(get_runner),
) -> ResultResponse:
    return await _run_on_scramble("cleanup", payload, runner)


@router.post("/unniss", response_model=ResultResponse)
async def unniss(
    payload: dict[str, Any] = Depends(json_body),
    runner: NissyRunner = Depends(get_runner),
) -> ResultResponse:
    """Rewrite a NISS sequence as plain moves."""
    return await _run_on_scramble("unniss", payload, runner)


@router.api_route("/{path:path}", methods=_ALL_METHODS, include_in_schema=False)
async def unmatched(path: str, request: Request) -> None:
    # Reached for unknown paths and for known paths hit with the wrong method.
    if request.method != "POST" or path == "steps":
        raise MethodNotAllowedError()
    await json_body(request)
    raise NotFoundError()
