from ldtkit.models.record import LDTGeometry, LDTLampSet, LuminaireRecord

__all__ = ["LDTGeometry", "LDTLampSet", "LuminaireRecord"]
