import logging
from typing import List

from fastapi import APIRouter, Depends, status

from db import store
from db.database import get_db
from models.folder import Folder, FolderCreate
from utils.auth import CurrentUser, get_current_user
from utils.errors import NotFound, ValidationError
from utils.normalize import is_blank, normalize_folder_kind

logger = logging.getLogger(__name__)
router = APIRouter()

@router.get("", response_model=List[Folder])
def list_folders(user: CurrentUser = Depends(get_current_user), conn = Depends(get_db)):
    """Visible folders, newest first."""
    return store.list_folders(conn, user.id)

@router.post("", status_code=status.HTTP_201_CREATED, response_model=Folder)
def create_folder(
    folder: FolderCreate,
    user: CurrentUser = Depends(get_current_user),
    conn = Depends(get_db),
):
    if is_blank(folder.name):
        raise ValidationError("Folder name is required")
    row = store.insert_folder(conn, user.id, folder.name.strip(), normalize_folder_kind(folder.type))
    logger.info("Folder %s created for user %s", row["id"], user.id)
    return row

@router.delete("/{folder_id}")
def delete_folder(folder_id: int, user: CurrentUser = Depends(get_current_user), conn = Depends(get_db)):
    """Soft delete: the row stays but drops out of every listing."""
    if not store.soft_delete_folder(conn, user.id, folder_id):
        raise NotFound("Folder not found")
    return {"message": "Folder deleted", "id": folder_id}
