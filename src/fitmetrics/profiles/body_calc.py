"""Body metrics calculator for resting energy expenditure and BMI.

Uses the revised Harris-Benedict equation for BMR. All inputs are metric
(kilograms, centimeters, years). Nothing is rounded here; callers round
for display.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Sex(Enum):
    """Biological sex for BMR calculation."""
    MALE = "male"
    FEMALE = "female"


# Revised Harris-Benedict coefficients:
# (constant, per kg weight, per cm height, per year of age)
HARRIS_BENEDICT_COEFFICIENTS = {
    Sex.MALE: (88.362, 13.397, 4.799, 5.677),
    Sex.FEMALE: (447.593, 9.247, 3.098, 4.330),
}


@dataclass(frozen=True)
class UserBiometrics:
    """Body metrics for a single user.

    Every field is optional. Missing or non-positive values are not an
    error; they just make BMR uncomputable.
    """

    weight_kg: Optional[float] = None
    height_cm: Optional[float] = None
    age_years: Optional[int] = None
    sex: Optional[Sex] = None


def _is_positive(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def compute_bmr(biometrics: UserBiometrics) -> Optional[float]:
    """Calculate Basal Metabolic Rate using the Harris-Benedict equation.

    male:   88.362 + 13.397*kg + 4.799*cm - 5.677*age
    female: 447.593 + 9.247*kg + 3.098*cm - 4.330*age

    Args:
        biometrics: User body metrics

    Returns:
        BMR in calories per day, or None when weight, height or age is
        missing or non-positive, or sex is unknown
    """
    if not (
        _is_positive(biometrics.weight_kg)
        and _is_positive(biometrics.height_cm)
        and _is_positive(biometrics.age_years)
    ):
        return None
    if biometrics.sex is None:
        return None

    constant, per_kg, per_cm, per_year = HARRIS_BENEDICT_COEFFICIENTS[biometrics.sex]
    return (
        constant
        + per_kg * biometrics.weight_kg  # type: ignore[operator]
        + per_cm * biometrics.height_cm  # type: ignore[operator]
        - per_year * biometrics.age_years  # type: ignore[operator]
    )


def compute_bmi(weight_kg: Optional[float], height_cm: Optional[float]) -> Optional[float]:
    """Calculate Body Mass Index (kg / m^2).

    Returns None if either value is missing or non-positive.
    """
    if not (_is_positive(weight_kg) and _is_positive(height_cm)):
        return None
    height_m = height_cm / 100  # type: ignore[operator]
    return weight_kg / (height_m * height_m)  # type: ignore[operator]


def parse_sex(value: Optional[str]) -> Optional[Sex]:
    """Parse 'male'/'female' (any case) into Sex; None and '' give None."""
    if value is None or value == "":
        return None
    try:
        return Sex(value.strip().lower())
    except ValueError:
        raise ValueError(f"sex must be 'male' or 'female', got '{value}'") from None
