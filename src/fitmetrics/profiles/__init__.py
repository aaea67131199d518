"""User body metrics: BMR and BMI."""

from __future__ import annotations

from fitmetrics.profiles.body_calc import (
    Sex,
    UserBiometrics,
    compute_bmi,
    compute_bmr,
)

__all__ = [
    "Sex",
    "UserBiometrics",
    "compute_bmi",
    "compute_bmr",
]
