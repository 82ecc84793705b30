"""
Payload assembler.

Turns a draft's final structures into the multipart form fields the
shop-creation endpoint expects. An empty structure is left out entirely so
the endpoint never reads "nothing configured" as "zero facings everywhere".
"""

import json
from typing import Iterable, Mapping

from models.facings import FacingEntry
from models.planogram import PlanogramRow
from models.shop import ShopIdentity


def build_planogram_data(rows: Iterable[PlanogramRow]) -> list[dict]:
    """Ordered list of {sku_id, sku_name}, nulls included."""
    return [{"sku_id": row.sku_id, "sku_name": row.sku_name} for row in rows]


def build_facings_data(entries: Mapping[str, FacingEntry]) -> dict[str, dict]:
    """Object keyed by sku_id with {sku_name, facings} values."""
    return {
        sku_id: {"sku_name": entry.sku_name, "facings": entry.facings}
        for sku_id, entry in entries.items()
    }


def assemble_payload(
    org_id: str,
    identity: ShopIdentity,
    planogram: list[PlanogramRow],
    facings: Mapping[str, FacingEntry],
) -> dict[str, str]:
    """
    Build the form fields for shop creation.

    Returns:
        Flat dict of field name → string value. planogram_data and
        facings_data are JSON and only present when non-empty.
    """
    payload = {
        "org_id": org_id,
        "shop_id": identity.shop_id,
        "shop_name": identity.shop_name,
        "shop_location": identity.shop_location,
        "shop_type": identity.shop_type,
    }

    if planogram:
        payload["planogram_data"] = json.dumps(build_planogram_data(planogram))
    if facings:
        payload["facings_data"] = json.dumps(build_facings_data(facings))

    return payload
