from __future__ import annotations

from salonbot.domain.entities.catalog import SalonCatalog

# Rupees. Combos are collapsed in the order listed.
DEFAULT_PRICES = {
    "haircut": "500.00",
    "hair coloring": "800.00",
    "facial": "400.00",
    "manicure": "300.00",
    "pedicure": "350.00",
    "spa treatment": "1000.00",
}

DEFAULT_COMBOS = [
    (["manicure", "pedicure"], "600.00"),
    (["haircut", "facial"], "800.00"),
]

DEFAULT_BRANCHES = [
    "Koramangala",
    "Indiranagar",
    "Jayanagar",
    "Whitefield",
]

DEFAULT_CATALOG = SalonCatalog.build(DEFAULT_PRICES, DEFAULT_COMBOS, DEFAULT_BRANCHES)
