"""FastAPI dependencies for settings, upload policy and storage directories."""

from pathlib import Path
from typing import Annotated

from fastapi import Depends

from toolkit.config import Settings, get_settings
from toolkit.schemas.upload import UploadConfiguration
from toolkit.utils.storage_utils import create_dir_if_not_exist

SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_upload_config(settings: SettingsDep) -> UploadConfiguration:
    """Build the per-request upload policy from settings."""
    return UploadConfiguration.from_settings(settings)


def get_upload_dir(settings: SettingsDep) -> Path:
    """Get the upload directory, creating it on first use."""
    return create_dir_if_not_exist(settings.upload_dir)


UploadConfigDep = Annotated[UploadConfiguration, Depends(get_upload_config)]
UploadDirDep = Annotated[Path, Depends(get_upload_dir)]
