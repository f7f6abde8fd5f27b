"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import WorkingWindow, parse_clock

WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


class DefaultsConfig(BaseModel):
    """Default settings for slot searches."""
    duration_minutes: int = 30

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        """Ensure service duration is positive."""
        if value <= 0:
            raise ValueError("duration_minutes must be greater than zero")
        return value


class WorkingHoursConfig(BaseModel):
    """Declared hours for one weekday, times as HH:MM."""
    weekday: int  # 0=Monday, 6=Sunday
    start: str
    end: str
    break_start: Optional[str] = None
    break_end: Optional[str] = None

    @field_validator("weekday")
    @classmethod
    def validate_weekday(cls, v: int) -> int:
        """Validate weekday is between 0 and 6."""
        if v not in range(7):
            raise ValueError(f"weekday must be between 0 and 6, got {v}")
        return v

    @field_validator("start", "end", "break_start", "break_end")
    @classmethod
    def validate_clock(cls, v: Optional[str]) -> Optional[str]:
        """Validate HH:MM format."""
        if v is None:
            return v
        parse_clock(v)
        return v.strip()

    @model_validator(mode="after")
    def validate_window(self) -> "WorkingHoursConfig":
        """Ensure the window opens before it closes and the break sits inside it."""
        self.to_window("validation")
        return self

    def to_window(self, staff_id: str) -> WorkingWindow:
        return WorkingWindow(
            staff_id=staff_id,
            weekday=self.weekday,
            start_time=parse_clock(self.start),
            end_time=parse_clock(self.end),
            break_start=parse_clock(self.break_start) if self.break_start else None,
            break_end=parse_clock(self.break_end) if self.break_end else None,
        )


class ServiceConfig(BaseModel):
    """A bookable service and how long it takes."""
    id: str
    name: str
    duration_minutes: int = 30

    @field_validator("duration_minutes")
    @classmethod
    def validate_duration(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("duration_minutes must be greater than zero")
        return value


class StaffConfig(BaseModel):
    """Staff member configuration."""
    id: str
    name: str
    working_hours: List[WorkingHoursConfig] = Field(default_factory=list)

    @field_validator("working_hours")
    @classmethod
    def validate_unique_weekdays(cls, value: List[WorkingHoursConfig]) -> List[WorkingHoursConfig]:
        """At most one entry per weekday."""
        seen: set[int] = set()
        for entry in value:
            if entry.weekday in seen:
                raise ValueError(f"Duplicate working hours for {WEEKDAY_NAMES[entry.weekday]}")
            seen.add(entry.weekday)
        return value

    def windows(self) -> List[WorkingWindow]:
        return [entry.to_window(self.id) for entry in self.working_hours]


class AppConfig(BaseModel):
    """Application configuration."""
    data_file: Path = Path("appointments.json")
    log_level: str = "WARNING"
    defaults: DefaultsConfig = Field(default_factory=DefaultsConfig)
    services: List[ServiceConfig] = Field(default_factory=list)
    staff: List[StaffConfig] = Field(default_factory=list)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Accept standard logging level names in any case."""
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log_level: {value}")
        return level

    @field_validator("staff")
    @classmethod
    def validate_staff(cls, value: List[StaffConfig]) -> List[StaffConfig]:
        """Ensure staff ids are unique."""
        seen: set[str] = set()
        for member in value:
            key = member.id.lower()
            if key in seen:
                raise ValueError(f"Duplicate staff id detected: {member.id}")
            seen.add(key)
        return value

    @field_validator("services")
    @classmethod
    def validate_services(cls, value: List[ServiceConfig]) -> List[ServiceConfig]:
        """Ensure service ids are unique."""
        seen: set[str] = set()
        for service in value:
            key = service.id.lower()
            if key in seen:
                raise ValueError(f"Duplicate service id detected: {service.id}")
            seen.add(key)
        return value

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        A relative ``data_file`` is resolved against the config file's directory.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        config = cls(**data)
        if not config.data_file.is_absolute():
            config.data_file = config_path.parent / config.data_file
        return config

    def find_staff(self, identifier: str) -> StaffConfig | None:
        """Find a staff member by id or name, case-insensitively."""
        for member in self.staff:
            if identifier.lower() in (member.id.lower(), member.name.lower()):
                return member
        return None

    def find_service(self, identifier: str) -> ServiceConfig | None:
        """Find a service by id or name, case-insensitively."""
        for service in self.services:
            if identifier.lower() in (service.id.lower(), service.name.lower()):
                return service
        return None

    def resolve_staff_id(self, identifier: str) -> str:
        """
        Resolve a staff identifier (id or name) to a staff id.

        Raises:
            ValueError: If identifier cannot be resolved
        """
        member = self.find_staff(identifier)
        if member is None:
            raise ValueError(
                f"Unknown staff member: '{identifier}'. "
                f"Use a configured id or name."
            )
        return member.id

    def working_windows(self) -> List[WorkingWindow]:
        windows: List[WorkingWindow] = []
        for member in self.staff:
            windows.extend(member.windows())
        return windows


def format_weekday(weekday: int) -> str:
    return WEEKDAY_NAMES[weekday]


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of the package)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path
