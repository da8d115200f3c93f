"""Material and inventory batch domain entities."""

from datetime import UTC, date, datetime
from enum import Enum
from typing import ClassVar

from pydantic import Field, field_validator

from moleculex.core.entities.identity import IdentifiedModel, Timestamp

DEFAULT_ODOR_STRENGTH = 5


class OlfactiveFamily(str, Enum):
    """Olfactive family classification."""

    CITRUS = "Citrus"
    FLORAL = "Floral"
    WOODY = "Woody"
    SPICY = "Spicy"
    GREEN = "Green"
    FRUITY = "Fruity"
    GOURMAND = "Gourmand"
    AMBER = "Amber"
    MUSK = "Musk"
    AQUATIC = "Aquatic"
    AROMATIC = "Aromatic"
    BALSAMIC = "Balsamic"
    MOSSY = "Mossy"
    ALDEHYDIC = "Aldehydic"
    SOLVENT = "Solvent"
    ADDITIVE = "Additive"


class MaterialOrigin(str, Enum):
    """How a material is obtained."""

    NATURAL = "Natural"
    SYNTHETIC = "Synthetic"
    NATURAL_ISOLATE = "Natural Isolate"
    BASE = "Base"
    ESSENTIAL_OIL = "Essential Oil"
    ABSOLUTE = "Absolute"
    RESINOID = "Resinoid"
    RESIN = "Resin"
    CO2_EXTRACT = "CO₂ Extract"


class PhysicalState(str, Enum):
    """Physical state at room temperature."""

    LIQUID = "Liquid"
    POWDER_CRYSTAL = "Powder / Crystal"
    SOLID = "Solid"
    PASTE = "Paste / Resin"


class NoteRole(str, Enum):
    """Position in the volatility pyramid."""

    TOP = "Top Note"
    TOP_HEART = "Top-Heart Note"
    HEART = "Heart Note"
    HEART_BASE = "Heart-Base Note"
    BASE = "Base Note"


class FunctionalRole(str, Enum):
    """Technical role a material plays in a blend."""

    DIFFUSER = "Diffuser"
    FIXATIVE = "Fixative"
    BOOSTER = "Booster"
    BLENDER = "Blender"
    MODIFIER = "Modifier"
    SHEER = "Sheer"
    TEXTURIZER = "Texturizer"
    STABILIZER = "Stabilizer"
    SOLVENT = "Solvent"
    FILTER = "Filter"
    RADIANT = "Radiant"
    SWEETENER = "Sweetener"
    FRESHENER = "Freshener"
    ANTIOXIDANT = "Antioxidant"


class InventoryBatch(IdentifiedModel):
    """A purchased lot of a material."""

    id_prefix: ClassVar[str] = "batch"

    batch_number: str = ""
    lab: str = ""  # manufacturer
    supplier: str = ""
    purchase_date: date | None = None
    stock_amount: float = Field(default=0.0, ge=0)  # grams
    cost_per_gram: float = Field(default=0.0, ge=0)

    @property
    def value(self) -> float:
        return self.stock_amount * self.cost_per_gram


class Material(IdentifiedModel):
    """
    A raw perfumery material.

    Owns its inventory batches. Stock and cost figures are never stored
    on the material; they are derived from the batches.
    """

    id_prefix: ClassVar[str] = "user"

    name: str
    olfactive_family: OlfactiveFamily = OlfactiveFamily.ADDITIVE
    origin: MaterialOrigin | None = None
    physical_state: PhysicalState | None = None
    note_roles: list[NoteRole] = Field(default_factory=list)
    functional_roles: list[FunctionalRole] = Field(default_factory=list)
    cas_number: str | None = None
    iupac_name: str | None = None
    odor_strength: float = 0.0
    impact: float = 0.0
    odor_strength_default: int = DEFAULT_ODOR_STRENGTH  # local only
    scent_dna: dict[str, float] = Field(default_factory=dict)
    evaporation_curve: list[float] = Field(default_factory=list)
    synergies: list[str] = Field(default_factory=list)
    ifra_max_concentration: float = 100.0
    sds_filename: str | None = None
    sds_url: str | None = None
    inventory_batches: list[InventoryBatch] = Field(default_factory=list)
    created_at: Timestamp = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("cas_number", "iupac_name", mode="before")
    @classmethod
    def _blank_as_none(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def natural_key(self) -> tuple[str, str]:
        """CAS number when known, otherwise the exact name."""
        if self.cas_number:
            return ("cas_number", self.cas_number)
        return ("name", self.name)
