from enum import Enum


class AmountUnit(Enum):
    MICROLITRE = "µL"
    MILLILITRE = "mL"
    MILLIGRAM = "mg"
    MICROGRAM = "µg"
    UNKNOWN = "Unknown"

    @classmethod
    def from_any(cls, value):
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            legacy_map = {
                "ul": cls.MICROLITRE,
                "μl": cls.MICROLITRE,  # greek mu
                "ml": cls.MILLILITRE,
                "ug": cls.MICROGRAM,
                "μg": cls.MICROGRAM,
            }
            if normalized in legacy_map:
                return legacy_map[normalized]
            for member in cls:
                if member.value.lower() == normalized or member.name.lower() == normalized:
                    return member
        raise ValueError(f"Cannot parse {value!r} into {cls.__name__}")

    @property
    def display(self) -> str:
        """Unit text for rendering next to an amount; blank when unknown."""
        return "" if self is AmountUnit.UNKNOWN else self.value


class DropdownField(Enum):
    """Sample fields whose dropdowns accept user-contributed options.

    Values are the keys used in the persisted custom-options slot.
    """

    VENDOR = "vendor"
    CONCENTRATION = "conc"
    STORAGE = "storage"
    HOST = "host"
    ISOTYPE = "isotype"
    CONJUGATE = "conjugate"

    @classmethod
    def from_any(cls, value):
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            sample_field_map = {
                "concentration": cls.CONCENTRATION,
                "storagecondition": cls.STORAGE,
                "storage_condition": cls.STORAGE,
                "hostspecies": cls.HOST,
                "host_species": cls.HOST,
            }
            if normalized in sample_field_map:
                return sample_field_map[normalized]
            for member in cls:
                if member.value == normalized or member.name.lower() == normalized:
                    return member
        raise ValueError(f"Cannot parse {value!r} into {cls.__name__}")

    @property
    def label(self):
        return _FIELD_LABELS.get(self, self.name.title())


_FIELD_LABELS = {
    DropdownField.VENDOR: "Vendor",
    DropdownField.CONCENTRATION: "Concentration",
    DropdownField.STORAGE: "Storage condition",
    DropdownField.HOST: "Host species",
    DropdownField.ISOTYPE: "Isotype",
    DropdownField.CONJUGATE: "Conjugate",
}
