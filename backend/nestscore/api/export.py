"""
Export API endpoints.

CSV, JSON and Excel downloads of every property, scored with the current
weights.
"""

from datetime import date
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from nestscore.database import get_db
from nestscore.models.property import Property
from nestscore.services import export_service
from nestscore.services.scoring_service import get_or_create_settings

logger = logging.getLogger(__name__)

router = APIRouter()

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


async def load_for_export(db: AsyncSession):
    result = await db.execute(select(Property).order_by(Property.created_at, Property.id))
    properties = result.scalars().all()
    user_settings = await get_or_create_settings(db)
    return properties, user_settings.weights


def attachment(extension: str) -> dict:
    filename = f"nestscore-properties-{date.today().isoformat()}.{extension}"
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


@router.get("/csv")
async def export_csv(db: AsyncSession = Depends(get_db)):
    properties, weights = await load_for_export(db)
    content = export_service.export_to_csv(properties, weights)
    return Response(content=content, media_type="text/csv", headers=attachment("csv"))


@router.get("/json")
async def export_json(db: AsyncSession = Depends(get_db)):
    properties, weights = await load_for_export(db)
    return export_service.export_to_json(properties, weights)


@router.get("/xlsx")
async def export_xlsx(db: AsyncSession = Depends(get_db)):
    properties, weights = await load_for_export(db)
    content = export_service.export_to_xlsx(properties, weights)
    return Response(content=content, media_type=XLSX_MEDIA_TYPE, headers=attachment("xlsx"))
