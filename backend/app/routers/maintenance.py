"""
Maintenance API Router
======================

DELETE /api/delete/all  - Wipe sensorData, citizenReports and preReports
POST   /api/delete/all  - Same thing, for clients that can only POST

There's no undo! Collections are emptied in batches of DELETE_BATCH_SIZE.
If one collection fails we still try the others, then answer 500 with
what got deleted and what failed.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.models import DeleteAllResponse
from app.routers.reports import get_report_manager
from app.services import ReportManager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["maintenance"])


@router.api_route("/delete/all", methods=["DELETE", "POST"], response_model=DeleteAllResponse,
                  response_model_exclude_none=True)
async def delete_all(manager: ReportManager = Depends(get_report_manager)):
    """
    Delete every stored record.

    Returns:
        {"ok": true, "deleted": {"sensorData": n, "citizenReports": n, "preReports": n}}
    """
    outcome = await manager.erase_all()

    if not outcome.ok:
        logger.error(f"Delete all finished with failures: {outcome.errors}")
        response = DeleteAllResponse(
            ok=False,
            deleted=outcome.deleted,
            error="Delete failed",
            detail="; ".join(outcome.errors.values()),
            failed=outcome.errors,
        )
        return JSONResponse(status_code=500, content=response.model_dump(exclude_none=True))

    logger.info(f"Deleted all records: {outcome.deleted}")
    return DeleteAllResponse(ok=True, deleted=outcome.deleted)
