"""
Export Service - CSV, JSON and Excel exports of scored properties.

Scores come from the scoring engine at export time, so exported numbers are
exactly what the API reports for the same answers and weights.
"""

import csv
import io
import logging
from typing import Any, Dict, List, Optional, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from nestscore.models.property import Property
from nestscore.services.scoring_service import get_catalogue, score_record
from scoring_engine.modules.classification import TIER_COLORS, classify

logger = logging.getLogger(__name__)

EXPORT_SHEET_NAME = "Properties"


def _format_price(price: Optional[float]) -> Any:
    if not price:
        return ""
    return int(price) if float(price).is_integer() else price


def _created_date(prop: Property) -> str:
    return prop.created_at.date().isoformat() if prop.created_at else ""


def export_headers() -> List[str]:
    """Column headers: fixed fields plus one column per weighted category."""
    return [
        "Name",
        "Address",
        "Postcode",
        "Price",
        "Agent",
        "Overall Score",
        *[c.name for c in get_catalogue().weighted_categories()],
        "Notes",
        "Created",
    ]


def export_rows(properties: Sequence[Property], weights: Optional[Dict[str, float]]) -> List[List[Any]]:
    categories = get_catalogue().weighted_categories()
    rows = []
    for prop in properties:
        score = score_record(prop, weights)
        category_values = []
        for category in categories:
            category_score = score.get_category_score(category.id)
            category_values.append(category_score.score if category_score else "")
        rows.append([
            prop.name or "",
            prop.address or "",
            prop.postcode or "",
            _format_price(prop.price),
            prop.agent or "",
            score.overall_score,
            *category_values,
            prop.notes or "",
            _created_date(prop),
        ])
    return rows


def export_to_csv(properties: Sequence[Property], weights: Optional[Dict[str, float]]) -> str:
    """CSV text, fields quoted only when they contain a comma, quote or newline."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(export_headers())
    writer.writerows(export_rows(properties, weights))
    return buffer.getvalue().rstrip("\n")


def export_to_json(properties: Sequence[Property], weights: Optional[Dict[str, float]]) -> List[Dict[str, Any]]:
    records = []
    for prop in properties:
        score = score_record(prop, weights)
        records.append({
            "id": prop.id,
            "name": prop.name,
            "address": prop.address,
            "postcode": prop.postcode,
            "price": prop.price,
            "agent": prop.agent,
            "viewing_date": prop.viewing_date,
            "listing_url": prop.listing_url,
            "answers": prop.answers or {},
            "notes": prop.notes or "",
            "latitude": prop.latitude,
            "longitude": prop.longitude,
            "created_at": prop.created_at.isoformat() if prop.created_at else None,
            "overall_score": score.overall_score,
            "category_scores": [cs.to_dict() for cs in score.category_scores],
        })
    return records


def export_to_xlsx(properties: Sequence[Property], weights: Optional[Dict[str, float]]) -> bytes:
    """Excel workbook bytes: same table as CSV, overall score filled by tier colour."""
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = EXPORT_SHEET_NAME

    headers = export_headers()
    sheet.append(headers)
    for cell in sheet[1]:
        cell.font = Font(bold=True)
        cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)

    overall_col = headers.index("Overall Score") + 1
    for row in export_rows(properties, weights):
        sheet.append(row)
        overall_cell = sheet.cell(row=sheet.max_row, column=overall_col)
        color = TIER_COLORS[classify(overall_cell.value).tier]
        overall_cell.fill = PatternFill(start_color=color, end_color=color, fill_type="solid")

    for index, header in enumerate(headers, start=1):
        sheet.column_dimensions[get_column_letter(index)].width = max(12, len(header) + 2)
    sheet.freeze_panes = "A2"

    buffer = io.BytesIO()
    workbook.save(buffer)
    logger.info(f"Exported {len(properties)} properties to Excel")
    return buffer.getvalue()
