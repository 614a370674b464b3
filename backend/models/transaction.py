"""
Land Transaction Model - One normalized row of the records file

CSV Column Mapping:
  CSV Column              → Field               Notes
  ─────────────────────────────────────────────────────────────
  Tipo                    → transaction_type    Classified (Art. 5°, Art. 35°, Directo)
  Tipo de negocio         → business_type       Trimmed text
  Nº expediente           → file_id             Trimmed text, may be empty
  Estado de ocupación     → occupancy_status    Trimmed text
  Precio total            → price               Parsed number, 0 if unparseable
  Superficie total(ha)    → surface_ha          Parsed number, 0 if unparseable
  Padrones                → regions             Departments named in the parcel path
  Fecha ingreso trámite   → transaction_date    dd/mm/yyyy, None if malformed
  (computed)              → price_per_ha        price / surface_ha, None when undefined
  (computed)              → primary_region      regions[0] or 'Sin datos'

Records are immutable once built; the loaded dataset is shared read-only by
every aggregation.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Tuple

from constants import PRICE_PER_HA_CEILING, UNKNOWN_REGION


@dataclass(frozen=True)
class LandTransaction:
    transaction_type: str = ''
    business_type: str = ''
    file_id: str = ''
    occupancy_status: str = ''
    price: float = 0.0
    surface_ha: float = 0.0
    price_per_ha: Optional[float] = None
    regions: Tuple[str, ...] = field(default_factory=tuple)
    transaction_date: Optional[date] = None
    date_text: str = ''

    @property
    def primary_region(self) -> str:
        return self.regions[0] if self.regions else UNKNOWN_REGION

    @property
    def year(self) -> Optional[int]:
        return self.transaction_date.year if self.transaction_date else None

    @property
    def has_valid_price_per_ha(self) -> bool:
        """True when price per hectare is defined and below the outlier ceiling."""
        return bool(self.price_per_ha) and self.price_per_ha < PRICE_PER_HA_CEILING

    def to_dict(self) -> dict:
        """Serialize for the top transactions table."""
        return {
            'fileId': self.file_id,
            'date': self.date_text,
            'transactionType': self.transaction_type,
            'businessType': self.business_type,
            'region': self.primary_region,
            'regions': list(self.regions),
            'surfaceHa': self.surface_ha,
            'price': self.price,
            'pricePerHa': self.price_per_ha,
            'occupancyStatus': self.occupancy_status,
        }
