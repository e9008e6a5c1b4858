"""Command relay models."""

from pydantic import BaseModel, Field


class CommandRequest(BaseModel):
    """Server console command to relay."""

    command: str = Field(..., max_length=1000, description="Console command")


class SavedCommandRequest(BaseModel):
    """Ad hoc command to save for later use."""

    command: str = Field(..., max_length=1000, description="Console command")
    label: str | None = Field(None, max_length=200, description="Display label")


class SavedCommand(BaseModel):
    """A saved ad hoc command."""

    id: str = Field(..., description="Stable command identifier")
    command: str = Field(..., description="Console command")
    label: str | None = Field(None, description="Display label")


class SavedCommandList(BaseModel):
    """All saved commands, in insertion order."""

    commands: list[SavedCommand] = Field(..., description="Saved commands")
    total: int = Field(..., description="Number of saved commands")


class CommandSentResponse(BaseModel):
    """Acknowledgement of a relayed command."""

    message: str = Field(..., description="Status message")
    command: str = Field(..., description="Command written to the console")
