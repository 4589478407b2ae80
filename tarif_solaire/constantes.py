from enum import Enum
from types import MappingProxyType


class TariffMode(str, Enum):
    PROGRESSIVE = "progressive"
    SELECTIVE = "selective"


class Distributor(str, Enum):
    LYDEC = "Lydec"
    REDAL = "Redal"
    AMENDIS_NORD = "Amendis Nord"
    AMENDIS_TANGER = "Amendis Tanger"
    ONEE = "ONEE"


TAX_RATE = 0.14                    # TVA 14%
PROGRESSIVE_THRESHOLD_KWH = 150    # monthly kWh, inclusive upper limit of progressive mode

# (upper bound kWh, price HT in MAD/kWh); None = unbounded
PROGRESSIVE_BRACKETS = (
    (100, 0.8137),   # T1 : 0–100 kWh
    (150, 0.9676),   # T2 : 101–150 kWh
)

SELECTIVE_BRACKETS = (
    (210, 0.9676),   # T3 : 0–210 kWh
    (310, 1.0757),   # T4 : 211–310 kWh
    (510, 1.2541),   # T5 : 311–510 kWh
    (None, 1.4773),  # T6 : > 510 kWh
)

MODE_LABELS = MappingProxyType({
    TariffMode.PROGRESSIVE: "Progressif",
    TariffMode.SELECTIVE: "Sélectif",
})

# Main cities served by a delegated distributor; everywhere else is ONEE direct.
CITY_DISTRIBUTOR = MappingProxyType({
    "Casablanca": Distributor.LYDEC,
    "Mohammedia": Distributor.LYDEC,
    "Bouskoura": Distributor.LYDEC,
    "Médiouna": Distributor.LYDEC,
    "Ain Harrouda": Distributor.LYDEC,
    "Tit Mellil": Distributor.LYDEC,
    "Rabat": Distributor.REDAL,
    "Salé": Distributor.REDAL,
    "Témara": Distributor.REDAL,
    "Skhirat": Distributor.REDAL,
    "Harhoura": Distributor.REDAL,
    "Tanger": Distributor.AMENDIS_TANGER,
    "Fnideq": Distributor.AMENDIS_NORD,
    "M'diq": Distributor.AMENDIS_NORD,
    "Tétouan": Distributor.AMENDIS_NORD,
    "Martil": Distributor.AMENDIS_NORD,
})

MOIS_FR = ['Jan', 'Fév', 'Mar', 'Avr', 'Mai', 'Juin',
           'Juil', 'Août', 'Sep', 'Oct', 'Nov', 'Déc']
