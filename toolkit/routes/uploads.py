"""Upload routes for file handling."""

from fastapi import APIRouter, Request

from toolkit.dependencies import UploadConfigDep, UploadDirDep
from toolkit.helpers import upload_files, upload_one_file
from toolkit.schemas.upload import UploadedFile

router = APIRouter()


@router.post("", response_model=list[UploadedFile])
async def upload_many(request: Request, upload_dir: UploadDirDep, config: UploadConfigDep):
    """Store every file in the multipart body using the configured policy."""
    return await upload_files(request, upload_dir, config)


@router.post("/one", response_model=UploadedFile)
async def upload_one(request: Request, upload_dir: UploadDirDep, config: UploadConfigDep):
    """Store the first file in the multipart body under a generated name."""
    return await upload_one_file(request, upload_dir, config)
