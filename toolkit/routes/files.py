"""Download routes for stored files."""

from fastapi import APIRouter

from toolkit.dependencies import UploadDirDep
from toolkit.helpers import download_static_file

router = APIRouter()


@router.get("/{name}")
async def download_file(name: str, upload_dir: UploadDirDep, as_name: str | None = None):
    """Download a stored file as an attachment, optionally under another name."""
    return download_static_file(upload_dir, name, as_name or name)
