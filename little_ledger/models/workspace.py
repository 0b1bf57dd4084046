"""Schema of the workspace config file."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class WorkspaceConfig(BaseModel):
    """Contents of <workspace>/config.json."""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    active_account: Optional[str] = Field(
        default=None,
        alias="activeAccount",
        description="Account that operations target when none is named"
    )
