from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Annotated, Optional

from tarif_solaire.constantes import Distributor, TariffMode


class TariffBracket(BaseModel):
    model_config = ConfigDict(frozen=True)

    upper_bound_kwh: Optional[float] = None   # None = unbounded
    unit_price_pretax: float = Field(..., ge=0)

    @property
    def unbounded(self) -> bool:
        return self.upper_bound_kwh is None


class TariffTable(BaseModel):
    """Ordered brackets for one billing mode.

    Bounds must be strictly ascending. At most one bracket is unbounded and
    it has to be the last one (the progressive table has none: it is never
    applied above 150 kWh).
    """
    model_config = ConfigDict(frozen=True)

    mode: TariffMode
    brackets: tuple[TariffBracket, ...]

    @model_validator(mode="after")
    def _check_order(self):
        if not self.brackets:
            raise ValueError("a tariff table needs at least one bracket")
        previous = 0.0
        for i, bracket in enumerate(self.brackets):
            if bracket.unbounded:
                if i != len(self.brackets) - 1:
                    raise ValueError("only the last bracket can be unbounded")
                continue
            if bracket.upper_bound_kwh <= previous:
                raise ValueError("bracket bounds must be strictly ascending")
            previous = bracket.upper_bound_kwh
        return self


class BillResult(BaseModel):
    cost_ttc: float


class BillLine(BaseModel):
    consumed_kwh: float
    unit_price_pretax: float
    cost_pretax: float


class BillBreakdown(BaseModel):
    mode: TariffMode
    monthly_kwh: float
    lines: list[BillLine] = []
    cost_ht: float = 0.0
    tva: float = 0.0
    cost_ttc: float = 0.0


class SavingsResult(BaseModel):
    bill_before: float
    bill_after: float
    savings_amount: float
    savings_percent: int


class BracketDetail(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_kwh: float = Field(..., alias="from")
    to_kwh: Optional[float] = Field(default=None, alias="to")
    price_pretax: float
    price_ttc: float


class TariffDetails(BaseModel):
    mode: str                  # "Progressif" | "Sélectif"
    brackets: list[BracketDetail]


class DiagnosticInput(BaseModel):
    city: str = ""
    annual_consumption_kwh: float = Field(..., ge=0)
    annual_production_kwh: float = Field(default=0.0, ge=0)
    # optional PV profile Jan..Dec; when given it replaces annual_production_kwh
    monthly_production_kwh: Optional[list[Annotated[float, Field(ge=0)]]] = Field(
        default=None, min_length=12, max_length=12
    )
    client_name: str = ""


class ExtractedBill(BaseModel):
    """Best-effort fields read from a bill image. Missing means None, never 0."""
    numero_contrat: Optional[str] = None
    numero_compteur: Optional[str] = None
    nom_client: Optional[str] = None
    adresse: Optional[str] = None
    ville: Optional[str] = None
    distributeur: Optional[str] = None
    puissance_souscrite_kva: Optional[float] = None
    type_abonnement: Optional[str] = None
    consommation_kwh: Optional[float] = None
    periode_jours: Optional[int] = None
    montant_ht: Optional[float] = None
    montant_tva: Optional[float] = None
    montant_ttc: Optional[float] = None
    tranche_tarifaire: Optional[str] = None
    index_ancien: Optional[float] = None
    index_nouveau: Optional[float] = None
    date_facture: Optional[str] = None
    periode_facturation: Optional[str] = None


class BillCheck(BaseModel):
    expected_distributor: Distributor
    distributor_matches: Optional[bool] = None
    consumption_kwh: Optional[float] = None
    expected_mode: Optional[str] = None
    reported_tranche: Optional[str] = None
    computed_ttc: Optional[float] = None
    reported_ttc: Optional[float] = None
    gap_percent: Optional[float] = None
