"""Interest picker API routes."""
import logging
from fastapi import APIRouter, Depends, HTTPException

from matty.dependencies import get_interest_selection
from matty.schemas.feed import InterestSelectionOut
from matty.services.interest_selection import InterestSelection

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/selection", response_model=InterestSelectionOut)
async def get_selection(selection: InterestSelection = Depends(get_interest_selection)):
    """Interest picker entries, loading the taxonomy on first use."""
    if selection.no_interests:
        await selection.load()
    return InterestSelectionOut.model_validate(selection)


@router.post("/selection/{name}/toggle", response_model=InterestSelectionOut)
async def toggle_interest(name: str, selection: InterestSelection = Depends(get_interest_selection)):
    if not selection.toggle(name):
        raise HTTPException(status_code=404, detail="Interest not found")
    logger.info("Toggled interest '%s'", name)
    return InterestSelectionOut.model_validate(selection)
