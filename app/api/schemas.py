"""Request bodies accepted by the HTTP API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CreateContainerRequest(BaseModel):
    image: str = ""
    name: str = ""
    cmd: list[str] = Field(default_factory=list)
    env: list[str] = Field(default_factory=list)
    platform: str = Field(default="", description="e.g. linux/amd64")


class ExecRequest(BaseModel):
    cmd: list[str] = Field(default_factory=list)


class BuildImageRequest(BaseModel):
    image_name: str = ""
    dockerfile: str = Field(default="", description="Dockerfile content.")
    context_path: str = Field(default="", description="Server-side build context, default '.'.")
    platform: str = ""


class ComposeFileUploadRequest(BaseModel):
    name: str = ""
    content: str = ""


class ComposeRunRequest(BaseModel):
    file_path: str = Field(default="", description="Absolute, or relative to the compose directory.")
    work_dir: str = Field(default="", description="Defaults to the compose file's directory.")
    env: dict[str, str] = Field(default_factory=dict)
    args: list[str] = Field(default_factory=list)


class ComposeScaleRequest(BaseModel):
    file_path: str = ""
    work_dir: str = ""
    service: str = ""
    replicas: int = 0


class CreateVolumeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(default="", alias="Name")
    driver: str = Field(default="", alias="Driver")
    labels: dict[str, str] = Field(default_factory=dict, alias="Labels")
    driver_opts: dict[str, str] = Field(default_factory=dict, alias="DriverOpts")


class SaveFileRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(default="", alias="fileName")
    content: str = ""
