"""Load activity logs (YAML/JSON) and CSV exports into engine entries."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, tzinfo
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional, TypeVar

import pandas as pd
import yaml

from fitmetrics.nutrition.models import FoodLogEntry, MealType, NutritionTargets
from fitmetrics.profiles.body_calc import UserBiometrics, parse_sex
from fitmetrics.tracking.models import WeightEntry
from fitmetrics.workouts.models import EffortLevel, WorkoutEntry, WorkoutType

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)
R = TypeVar("R")


@dataclass
class ActivityLog:
    """Everything read from one activity log file."""

    biometrics: UserBiometrics = field(default_factory=UserBiometrics)
    targets: Optional[NutritionTargets] = None
    starting_weight_kg: Optional[float] = None
    workouts: list[WorkoutEntry] = field(default_factory=list)
    meals: list[FoodLogEntry] = field(default_factory=list)
    weights: list[WeightEntry] = field(default_factory=list)


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _optional_float(value: Any, name: str) -> Optional[float]:
    if _is_missing(value) or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got '{value}'") from None


def _optional_int(value: Any, name: str) -> Optional[int]:
    number = _optional_float(value, name)
    if number is None:
        return None
    if not number.is_integer():
        raise ValueError(f"{name} must be a whole number, got '{value}'")
    return int(number)


def _required_float(record: dict, name: str) -> float:
    value = _optional_float(record.get(name), name)
    if value is None:
        raise ValueError(f"Missing required field '{name}'")
    return value


def _optional_str(value: Any) -> Optional[str]:
    if _is_missing(value) or value == "":
        return None
    return str(value)


def _parse_enum(enum_cls: type[E], value: Any, name: str) -> E:
    if _is_missing(value):
        raise ValueError(f"Missing required field '{name}'")
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        choices = ", ".join(m.value for m in enum_cls)
        raise ValueError(f"{name} must be one of {choices}, got '{value}'") from None


class LogLoader:
    """Reads activity logs and localizes their timestamps.

    Timestamps without an offset are taken to be wall-clock times in the
    loader's zone. Offset-aware timestamps are kept as they are.
    """

    WORKOUT_COLUMNS = ["type", "duration_minutes", "effort_level", "occurred_at"]
    MEAL_COLUMNS = ["calories", "protein_g", "carbs_g", "fat_g", "occurred_at", "meal_type"]
    WEIGHT_COLUMNS = ["weight_kg", "recorded_at"]

    def __init__(self, tz: tzinfo):
        """Initialize the loader.

        Args:
            tz: Zone used for timestamps that carry no offset
        """
        self.tz = tz

    def load(self, path: Path) -> ActivityLog:
        """Load an activity log file.

        YAML and JSON share the same structure (JSON is read by the YAML
        parser):

            profile: {weight_kg, height_cm, age_years, sex, starting_weight_kg}
            targets: {daily_calories, daily_protein, daily_carbs, daily_fat}
            workouts: [{type, duration_minutes, effort_level, occurred_at, ...}]
            meals: [{calories, protein_g, carbs_g, fat_g, occurred_at, meal_type, ...}]
            weights: [{weight_kg, recorded_at, notes}]

        A section may instead name a CSV export (``weights: weights.csv``),
        resolved relative to the log file.

        Args:
            path: Path to the log file

        Returns:
            ActivityLog with every section that was present

        Raises:
            ValueError: If a section or record is malformed
        """
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a mapping at the top level")

        log = ActivityLog()

        profile = data.get("profile") or {}
        log.biometrics = UserBiometrics(
            weight_kg=_optional_float(profile.get("weight_kg"), "weight_kg"),
            height_cm=_optional_float(profile.get("height_cm"), "height_cm"),
            age_years=_optional_int(profile.get("age_years"), "age_years"),
            sex=parse_sex(_optional_str(profile.get("sex"))),
        )
        log.starting_weight_kg = _optional_float(
            profile.get("starting_weight_kg"), "starting_weight_kg"
        )

        targets = data.get("targets")
        if targets:
            log.targets = NutritionTargets(
                daily_calories=_required_float(targets, "daily_calories"),
                daily_protein=_required_float(targets, "daily_protein"),
                daily_carbs=_required_float(targets, "daily_carbs"),
                daily_fat=_required_float(targets, "daily_fat"),
            )

        base_dir = Path(path).parent
        log.workouts = self._load_section(
            data, "workouts", base_dir, self.workout_from_record, self.load_workouts_csv
        )
        log.meals = self._load_section(
            data, "meals", base_dir, self.meal_from_record, self.load_meals_csv
        )
        log.weights = self._load_section(
            data, "weights", base_dir, self.weight_from_record, self.load_weights_csv
        )

        logger.info(
            "Loaded %s: %d workouts, %d meals, %d weigh-ins",
            path,
            len(log.workouts),
            len(log.meals),
            len(log.weights),
        )
        return log

    def load_workouts_csv(self, csv_path: Path) -> list[WorkoutEntry]:
        """Load workouts from a CSV export.

        CSV format:
            type,duration_minutes,effort_level,occurred_at,calories_burned,notes
            gym,45,moderate,2025-01-15T18:30:00,,leg day

        Raises:
            ValueError: If required columns are missing
        """
        df = self._read_csv(csv_path, self.WORKOUT_COLUMNS)
        entries = [self.workout_from_record(row.to_dict()) for _, row in df.iterrows()]
        logger.info("Loaded %d workouts from %s", len(entries), csv_path)
        return entries

    def load_meals_csv(self, csv_path: Path) -> list[FoodLogEntry]:
        """Load food log entries from a CSV export.

        CSV format:
            calories,protein_g,carbs_g,fat_g,occurred_at,meal_type,name
            520,35,60,14,2025-01-15T12:10:00,lunch,chicken rice bowl

        Raises:
            ValueError: If required columns are missing
        """
        df = self._read_csv(csv_path, self.MEAL_COLUMNS)
        entries = [self.meal_from_record(row.to_dict()) for _, row in df.iterrows()]
        logger.info("Loaded %d meals from %s", len(entries), csv_path)
        return entries

    def load_weights_csv(self, csv_path: Path) -> list[WeightEntry]:
        """Load weigh-ins from a CSV export.

        Raises:
            ValueError: If required columns are missing
        """
        df = self._read_csv(csv_path, self.WEIGHT_COLUMNS)
        entries = [self.weight_from_record(row.to_dict()) for _, row in df.iterrows()]
        logger.info("Loaded %d weigh-ins from %s", len(entries), csv_path)
        return entries

    def workout_from_record(self, record: dict) -> WorkoutEntry:
        return WorkoutEntry(
            workout_type=_parse_enum(WorkoutType, record.get("type"), "type"),
            duration_minutes=_required_float(record, "duration_minutes"),
            effort_level=_parse_enum(EffortLevel, record.get("effort_level"), "effort_level"),
            occurred_at=self.parse_timestamp(record.get("occurred_at"), "occurred_at"),
            calories_burned=_optional_float(record.get("calories_burned"), "calories_burned"),
            notes=_optional_str(record.get("notes")),
        )

    def meal_from_record(self, record: dict) -> FoodLogEntry:
        return FoodLogEntry(
            calories=_required_float(record, "calories"),
            protein_g=_required_float(record, "protein_g"),
            carbs_g=_required_float(record, "carbs_g"),
            fat_g=_required_float(record, "fat_g"),
            occurred_at=self.parse_timestamp(record.get("occurred_at"), "occurred_at"),
            meal_type=_parse_enum(MealType, record.get("meal_type"), "meal_type"),
            name=_optional_str(record.get("name")),
        )

    def weight_from_record(self, record: dict) -> WeightEntry:
        return WeightEntry(
            weight_kg=_required_float(record, "weight_kg"),
            recorded_at=self.parse_timestamp(record.get("recorded_at"), "recorded_at"),
            notes=_optional_str(record.get("notes")),
        )

    def parse_timestamp(self, value: Any, name: str = "timestamp") -> datetime:
        """Parse an ISO-8601 string, date or datetime into an aware datetime.

        A bare date means midnight. Values without an offset are localized
        to the loader's zone.

        Raises:
            ValueError: If the value is missing or not a timestamp
        """
        if _is_missing(value):
            raise ValueError(f"Missing required field '{name}'")

        if isinstance(value, pd.Timestamp):
            parsed = value.to_pydatetime()
        elif isinstance(value, datetime):
            parsed = value
        elif isinstance(value, date):
            parsed = datetime.combine(value, time())
        elif isinstance(value, str):
            text = value.strip()
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            try:
                parsed = datetime.fromisoformat(text)
            except ValueError:
                raise ValueError(f"{name} is not an ISO-8601 timestamp: '{value}'") from None
        else:
            raise ValueError(f"{name} is not a timestamp: {value!r}")

        if parsed.tzinfo is None or parsed.utcoffset() is None:
            parsed = parsed.replace(tzinfo=self.tz)
        return parsed

    def _load_section(
        self,
        data: dict,
        name: str,
        base_dir: Path,
        from_record: Callable[[dict], R],
        from_csv: Callable[[Path], list[R]],
    ) -> list[R]:
        """Records listed inline, or read from the CSV file the section names."""
        value = data.get(name)
        if isinstance(value, str):
            csv_path = Path(value)
            if not csv_path.is_absolute():
                csv_path = base_dir / csv_path
            return from_csv(csv_path)
        return [from_record(r) for r in self._section(data, name)]

    @staticmethod
    def _section(data: dict, name: str) -> list[dict]:
        records = data.get(name) or []
        if not isinstance(records, list):
            raise ValueError(f"'{name}' must be a list of records")
        for i, record in enumerate(records):
            if not isinstance(record, dict):
                raise ValueError(f"{name}[{i}] must be a mapping, got {record!r}")
        return records

    @staticmethod
    def _read_csv(csv_path: Path, required: list[str]) -> pd.DataFrame:
        df = pd.read_csv(csv_path)

        # Validate required columns
        missing = set(required) - set(df.columns)
        if missing:
            raise ValueError(
                f"Missing required columns: {sorted(missing)}. "
                f"Required columns are: {required}"
            )
        return df
