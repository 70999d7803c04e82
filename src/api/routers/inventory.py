"""Direct, model-free access to the inventory summary."""

from typing import Annotated

from fastapi import APIRouter, Depends

from api.dependencies import get_inventory_service
from domain.schemas import InventoryResponse
from logic.inventory import InventoryService

router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.get(
    "",
    response_model=InventoryResponse,
    summary="Read the inventory",
)
async def read_inventory(
    inventory: Annotated[InventoryService, Depends(get_inventory_service)],
) -> InventoryResponse:
    """Return the same summary the readInventory tool gives the model."""
    return InventoryResponse(summary=await inventory.read_inventory())
