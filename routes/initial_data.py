from fastapi import APIRouter, Depends

from utils.aggregate import load_initial_data
from utils.auth import CurrentUser, get_current_user

router = APIRouter()

@router.get("/initial-data")
async def initial_data(user: CurrentUser = Depends(get_current_user)):
    """Everything the client needs at startup, decks carrying their cards."""
    return await load_initial_data(user.id)
