from typing import List
from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile, status
from sqlalchemy.orm import Session

from app.core.constants import RoleEnum, StorageTypeEnum
from app.schemas.file import File as FileSchema
from app.schemas.response import APIResponse
from app.schemas.user import UserContext
from app.services.file import file_service
from app.utils import deps
from app.utils.uploads import read_image_upload

router = APIRouter()


@router.get("/all", response_model=APIResponse[List[FileSchema]])
def list_files(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.require_role(RoleEnum.ADMIN))
):
    files = file_service.list_files(db, owner_id=context.user_id)
    return APIResponse(message="Files fetched successfully", data=files)


@router.get("/", response_model=APIResponse[List[FileSchema]])
def search_files(
    db: Session = Depends(deps.get_db),
    name: str = Query(..., min_length=1),
    kind: StorageTypeEnum = Query(StorageTypeEnum.IMAGE),
    context: UserContext = Depends(deps.require_role(RoleEnum.ADMIN))
):
    files = file_service.search_files(db, name=name, kind=kind, owner_id=context.user_id)
    return APIResponse(message="Files fetched successfully", data=files)


@router.get("/{file_id}")
def render_file(*, db: Session = Depends(deps.get_db), file_id: int):
    content, mime_type = file_service.render(db, file_id=file_id)
    return Response(content=content, media_type=mime_type)


@router.post("/", response_model=APIResponse[FileSchema], status_code=status.HTTP_201_CREATED)
async def upload_file(
    *,
    db: Session = Depends(deps.get_transactional_db),
    file: UploadFile = File(...),
    context: UserContext = Depends(deps.require_role(RoleEnum.ADMIN))
):
    upload = await read_image_upload(file)
    if upload is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded.")
    new_file = file_service.create(db, owner_id=context.user_id, kind=StorageTypeEnum.IMAGE, upload=upload)
    return APIResponse(message="File uploaded successfully", data=new_file)


@router.put("/{file_id}", response_model=APIResponse[FileSchema])
async def replace_file(
    *,
    db: Session = Depends(deps.get_transactional_db),
    file_id: int,
    file: UploadFile = File(...),
    context: UserContext = Depends(deps.require_role(RoleEnum.ADMIN))
):
    upload = await read_image_upload(file)
    if upload is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded.")
    updated_file = file_service.replace(db, file_id=file_id, owner_id=context.user_id, kind=StorageTypeEnum.IMAGE, upload=upload)
    return APIResponse(message="File replaced successfully", data=updated_file)


@router.delete("/{file_id}", response_model=APIResponse[FileSchema])
def delete_file(
    *,
    db: Session = Depends(deps.get_transactional_db),
    file_id: int,
    context: UserContext = Depends(deps.require_role(RoleEnum.ADMIN))
):
    deleted_file = file_service.delete(db, file_id=file_id, owner_id=context.user_id, kind=StorageTypeEnum.IMAGE)
    return APIResponse(message="File deleted successfully", data=deleted_file)
