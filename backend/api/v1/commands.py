"""
Command API endpoints.

Relays console commands to the game server and manages saved ad hoc commands.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from backend.config import settings
from backend.models.commands import (
    CommandRequest,
    CommandSentResponse,
    SavedCommand,
    SavedCommandList,
    SavedCommandRequest,
)
from backend.models.common import ErrorResponse
from backend.rate_limit import limiter
from backend.services.command_relay import normalize_command, send_command
from backend.services.command_store import CommandNotFoundError, CommandStore, StoredCommand
from backend.services.pack_service import get_command_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["commands"])


def _error(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
            },
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )


def _to_model(stored: StoredCommand) -> SavedCommand:
    return SavedCommand(id=stored.id, command=stored.command, label=stored.label)


def _relay(command: str) -> CommandSentResponse | JSONResponse:
    try:
        sent = send_command(Path(settings.fifo_path), command)
    except ValueError as e:
        return _error(400, "INVALID_COMMAND", str(e))
    except OSError as e:
        logger.error(f"Error writing to command FIFO {settings.fifo_path}: {e}")
        return _error(500, "RELAY_FAILED", "Could not deliver command to the server")
    return CommandSentResponse(message="Command sent successfully", command=sent)


@router.post(
    "/commands/send",
    response_model=CommandSentResponse,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
@limiter.limit(settings.command_rate_limit)
def send_console_command(
    body: CommandRequest,
    request: Request,  # noqa: ARG001 - required by slowapi limiter
):
    """
    Write a console command to the server's command pipe.
    """
    return _relay(body.command)


@router.get("/commands", response_model=SavedCommandList)
def list_commands(store: CommandStore = Depends(get_command_store)):
    """
    List saved commands in the order they were added.
    """
    commands = [_to_model(c) for c in store.list()]
    return SavedCommandList(commands=commands, total=len(commands))


@router.post(
    "/commands",
    response_model=SavedCommand,
    status_code=201,
    responses={400: {"model": ErrorResponse}},
)
def save_command(body: SavedCommandRequest, store: CommandStore = Depends(get_command_store)):
    """
    Save an ad hoc command for later use.
    """
    try:
        command = normalize_command(body.command)
    except ValueError as e:
        return _error(400, "INVALID_COMMAND", str(e))
    return _to_model(store.add(command, label=body.label))


@router.get(
    "/commands/{command_id}",
    response_model=SavedCommand,
    responses={404: {"model": ErrorResponse}},
)
def get_command(command_id: str, store: CommandStore = Depends(get_command_store)):
    try:
        return _to_model(store.get(command_id))
    except CommandNotFoundError:
        return _error(404, "NOT_FOUND", f"Command not found: {command_id}")


@router.put(
    "/commands/{command_id}",
    response_model=SavedCommand,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def update_command(
    command_id: str,
    body: SavedCommandRequest,
    store: CommandStore = Depends(get_command_store),
):
    """
    Replace a saved command.
    """
    try:
        command = normalize_command(body.command)
    except ValueError as e:
        return _error(400, "INVALID_COMMAND", str(e))

    try:
        return _to_model(store.update(command_id, command, label=body.label))
    except CommandNotFoundError:
        return _error(404, "NOT_FOUND", f"Command not found: {command_id}")


@router.delete(
    "/commands/{command_id}",
    status_code=204,
    responses={404: {"model": ErrorResponse}},
)
def delete_command(command_id: str, store: CommandStore = Depends(get_command_store)):
    try:
        store.remove(command_id)
    except CommandNotFoundError:
        return _error(404, "NOT_FOUND", f"Command not found: {command_id}")
    return Response(status_code=204)


@router.post(
    "/commands/{command_id}/run",
    response_model=CommandSentResponse,
    responses={
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
@limiter.limit(settings.command_rate_limit)
def run_command(
    command_id: str,
    request: Request,  # noqa: ARG001 - required by slowapi limiter
    store: CommandStore = Depends(get_command_store),
):
    """
    Relay a saved command to the server.
    """
    try:
        stored = store.get(command_id)
    except CommandNotFoundError:
        return _error(404, "NOT_FOUND", f"Command not found: {command_id}")
    return _relay(stored.command)
