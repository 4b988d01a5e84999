# domain/shipment.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional
import math

from domain.errors import ValidationError
from domain.models import Country, Dimensions

# Freightos wymaga wymiarów dla "boxes" – zakładamy gęstość 200 kg/m³
ASSUMED_DENSITY_KG_M3 = 200.0
SHIPPING_MODES = ("air", "ocean", "express")
LOAD_TYPES = ("boxes", "pallets", "envelopes", "crates")


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def estimate_side_cm(weight_kg: float) -> float:
    """Bok sześcianu (cm) dla przesyłki o danej wadze.

    Waga <= 0 daje zdegenerowany wynik (0 lub ujemny bok) – odrzucamy ją
    wcześniej w ShipmentRequest.validate().
    """
    volume_m3 = weight_kg / ASSUMED_DENSITY_KG_M3
    side_m = math.copysign(abs(volume_m3) ** (1.0 / 3.0), volume_m3)
    return side_m * 100.0


def estimate_dimensions(weight_kg: float) -> Dimensions:
    side_cm = estimate_side_cm(weight_kg)
    # nan/inf nie da się zaokrąglić do int – zdegenerowany wymiar "0"
    side = str(round_half_up(side_cm)) if math.isfinite(side_cm) else "0"
    return Dimensions(width=side, length=side, height=side)


def resolve_location(country_code: str, country: Optional[Country] = None) -> str:
    """Miasto (jeśli znane) albo surowy kod kraju – bez walidacji formatu."""
    city = (country.city or "").strip() if country is not None else ""
    if city:
        return city
    return country_code


@dataclass
class ShipmentRequest:
    origin: str
    destination: str
    weight: float
    mode: str = "air"
    load_type: str = "boxes"
    quantity: int = 1

    def validate(self) -> None:
        if not (self.origin or "").strip():
            raise ValidationError("Missing required parameter: origin")
        if not (self.destination or "").strip():
            raise ValidationError("Missing required parameter: destination")
        if isinstance(self.weight, bool) or not isinstance(self.weight, (int, float)):
            raise ValidationError(f"Weight must be a number, got {self.weight!r}")
        if not math.isfinite(self.weight) or self.weight <= 0:
            raise ValidationError("Weight must be greater than 0 kg")
        if self.mode not in SHIPPING_MODES:
            raise ValidationError(
                f"Unsupported shipping mode '{self.mode}' (expected one of: {', '.join(SHIPPING_MODES)})"
            )
        if self.load_type not in LOAD_TYPES:
            raise ValidationError(
                f"Unsupported load type '{self.load_type}' (expected one of: {', '.join(LOAD_TYPES)})"
            )
        if self.quantity < 1:
            raise ValidationError("Quantity must be at least 1")

    @property
    def dimensions(self) -> Dimensions:
        return estimate_dimensions(self.weight)

    def with_locations(self, origin: str, destination: str) -> "ShipmentRequest":
        return ShipmentRequest(
            origin=origin,
            destination=destination,
            weight=self.weight,
            mode=self.mode,
            load_type=self.load_type,
            quantity=self.quantity,
        )

    def to_query_params(self) -> Dict[str, str]:
        dims = self.dimensions
        return {
            "origin": self.origin,
            "destination": self.destination,
            "weight": _format_weight(self.weight),
            "width": dims.width,
            "length": dims.length,
            "height": dims.height,
            "loadtype": self.load_type or "boxes",
            "quantity": str(self.quantity),
        }


def _format_weight(weight: float) -> str:
    # 500.0 -> "500", 12.5 -> "12.5"
    if float(weight).is_integer():
        return str(int(weight))
    return repr(float(weight))
