"""Olfactive family profiles."""

from pydantic import BaseModel, ConfigDict, Field

from moleculex.core.entities.material import OlfactiveFamily


class FamilyProfile(BaseModel):
    """Descriptive profile of an olfactive family."""

    model_config = ConfigDict(frozen=True)

    main_character: str
    description: str


DEFAULT_FAMILY_PROFILES: dict[OlfactiveFamily, FamilyProfile] = {
    OlfactiveFamily.CITRUS: FamilyProfile(
        main_character="Zesty & Sparkling",
        description="Famous for their refreshing, effervescent, and uplifting qualities.",
    ),
    OlfactiveFamily.FLORAL: FamilyProfile(
        main_character="Romantic & Versatile",
        description="The heart of perfumery, ranging from fresh lily-of-the-valley to rich tuberose.",
    ),
    OlfactiveFamily.WOODY: FamilyProfile(
        main_character="Elegant & Grounding",
        description="Evoking forests. Dry, smoky, and resinous notes provide structure.",
    ),
    OlfactiveFamily.SPICY: FamilyProfile(
        main_character="Warm & Exotic",
        description="Spices add warmth and pungency, from hot cinnamon to cold cardamom.",
    ),
    OlfactiveFamily.GREEN: FamilyProfile(
        main_character="Crisp & Natural",
        description="Captures the sharp scent of cut grass and crushed leaves.",
    ),
    OlfactiveFamily.FRUITY: FamilyProfile(
        main_character="Juicy & Playful",
        description="Luscious, ripe, edible notes beyond citrus.",
    ),
    OlfactiveFamily.GOURMAND: FamilyProfile(
        main_character="Edible & Comforting",
        description="Sweet, dessert-like aromas like vanilla and caramel.",
    ),
    OlfactiveFamily.AMBER: FamilyProfile(
        main_character="Warm & Sensual",
        description="Rich, opulent notes like labdanum and vanilla.",
    ),
    OlfactiveFamily.MUSK: FamilyProfile(
        main_character="Clean & Skin-like",
        description="Soft, powdery, and sensual foundation notes.",
    ),
    OlfactiveFamily.AQUATIC: FamilyProfile(
        main_character="Fresh & Oceanic",
        description="Evokes sea spray and rain. Clean and transparent.",
    ),
    OlfactiveFamily.AROMATIC: FamilyProfile(
        main_character="Herbaceous & Fresh",
        description="Fresh herbs like lavender and rosemary.",
    ),
    OlfactiveFamily.BALSAMIC: FamilyProfile(
        main_character="Rich & Resinous",
        description="Sweet, warm resins like benzoin and myrrh.",
    ),
    OlfactiveFamily.MOSSY: FamilyProfile(
        main_character="Deep & Mysterious",
        description="Forest floor, mosses, and damp earth.",
    ),
    OlfactiveFamily.ALDEHYDIC: FamilyProfile(
        main_character="Abstract & Radiant",
        description="Synthetic materials that provide lift and sparkle.",
    ),
    OlfactiveFamily.SOLVENT: FamilyProfile(
        main_character="Neutral & Functional",
        description="Carriers and diluents.",
    ),
    OlfactiveFamily.ADDITIVE: FamilyProfile(
        main_character="Technical & Protective",
        description="Functional ingredients for stability.",
    ),
}


class FamilyProfiles(BaseModel):
    """
    Immutable profile table for all families.

    Created once from the built-in defaults and replaced wholesale on edit.
    """

    model_config = ConfigDict(frozen=True)

    profiles: dict[OlfactiveFamily, FamilyProfile] = Field(
        default_factory=lambda: dict(DEFAULT_FAMILY_PROFILES)
    )

    @classmethod
    def defaults(cls) -> "FamilyProfiles":
        return cls()

    def get(self, family: OlfactiveFamily) -> FamilyProfile:
        return self.profiles.get(family, DEFAULT_FAMILY_PROFILES[family])

    def with_override(self, family: OlfactiveFamily, profile: FamilyProfile) -> "FamilyProfiles":
        """Return a new table with one family replaced."""
        return FamilyProfiles(profiles={**self.profiles, family: profile})

    def with_overrides(self, overrides: dict[OlfactiveFamily, FamilyProfile]) -> "FamilyProfiles":
        return FamilyProfiles(profiles={**self.profiles, **overrides})

    def overrides(self) -> dict[OlfactiveFamily, FamilyProfile]:
        """Families whose profile differs from the built-in default."""
        return {
            family: profile
            for family, profile in self.profiles.items()
            if profile != DEFAULT_FAMILY_PROFILES.get(family)
        }
