from typing import Any

from fastapi import APIRouter, Body, HTTPException
from fastapi.responses import JSONResponse

from fabric_catalog.errors import ERROR_STATUS_MAP
from fabric_catalog.schemas.fabric import FabricRead
from fabric_catalog.schemas.result import OperationResult
from fabric_catalog.services.fabric_read_service import fabric_read_service
from fabric_catalog.services.fabric_write_service import fabric_write_service

router = APIRouter(prefix="/api/v1/fabrics", tags=["fabrics"])


def to_response(result: OperationResult, success_status: int = 200) -> JSONResponse:
    """Failures keep the result body but carry the matching HTTP status."""
    if result.success:
        status_code = success_status
    else:
        status_code = ERROR_STATUS_MAP.get(result.error_type, 500)
    return JSONResponse(
        status_code=status_code,
        content=result.model_dump(mode="json", by_alias=True),
    )


@router.get("", response_model=list[FabricRead])
async def list_fabrics():
    return await fabric_read_service.list_fabrics()


@router.get("/{fabric_id}", response_model=FabricRead)
async def get_fabric(fabric_id: int):
    fabric = await fabric_read_service.get_fabric_for_edit(fabric_id)
    if fabric is None:
        raise HTTPException(status_code=404, detail="Fabric not found")
    return fabric


# Write bodies are taken raw so validation errors come back as a field map
@router.post("", response_model=OperationResult)
async def create_fabric(payload: Any = Body(...)):
    result = await fabric_write_service.create_fabric(payload)
    return to_response(result, success_status=201)


@router.patch("/{fabric_id}", response_model=OperationResult)
async def update_fabric(fabric_id: int, payload: Any = Body(...)):
    result = await fabric_write_service.update_fabric(fabric_id, payload)
    return to_response(result)


@router.put("/{fabric_id}/variants", response_model=OperationResult)
async def replace_variants(fabric_id: int, variants: Any = Body(...)):
    """Variant manager: the body is the full desired variant list."""
    result = await fabric_write_service.update_fabric(fabric_id, {"variants": variants})
    return to_response(result)


@router.delete("/{fabric_id}", response_model=OperationResult)
async def delete_fabric(fabric_id: int):
    result = await fabric_write_service.delete_fabric(fabric_id)
    return to_response(result)
