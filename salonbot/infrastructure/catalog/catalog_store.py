from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from salonbot.domain.entities.catalog import SalonCatalog
from salonbot.infrastructure.catalog.catalog_data import DEFAULT_CATALOG

logger = logging.getLogger(__name__)


def load_catalog(path: str | None = None) -> SalonCatalog:
    """
    Load the price list and branches from a JSON file, or return the built-in catalog.

    Expected shape::

        {
          "prices": {"haircut": 500, ...},
          "combos": [{"services": ["manicure", "pedicure"], "price": 600}],
          "branches": ["Koramangala", ...],
          "currency_symbol": "₹"
        }
    """
    if not path:
        return DEFAULT_CATALOG

    file_path = Path(path)
    with open(file_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    catalog = catalog_from_dict(data)
    logger.info(
        "Catalog loaded",
        extra={"path": str(file_path), "services": len(catalog.prices), "branches": len(catalog.branches)},
    )
    return catalog


def catalog_from_dict(data: dict[str, Any]) -> SalonCatalog:
    prices = data.get("prices") or {}
    if not prices:
        raise ValueError("Catalog must define at least one service price")

    branches = data.get("branches") or []
    if not branches:
        raise ValueError("Catalog must define at least one branch")

    combos = []
    for combo in data.get("combos") or []:
        members = combo.get("services") or []
        if len(members) < 2:
            raise ValueError(f"Combo needs at least two services: {combo!r}")
        combos.append((members, combo["price"]))

    return SalonCatalog.build(
        prices=prices,
        combos=combos,
        branches=branches,
        currency_symbol=data.get("currency_symbol", DEFAULT_CATALOG.currency_symbol),
    )
