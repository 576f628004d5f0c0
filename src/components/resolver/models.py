"""
Resolver component models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from src.domain.entities import DEFAULT_ROBOTS
from src.rules.models import Rules

# --- Configuration ---


@dataclass(frozen=True)
class CourseAreaRecord:
    """Fixed SEO for domains connected to the course area."""

    title: str = "Courses"
    description: str = "Browse our course offerings"
    site_name: str = "Courses"


@dataclass(frozen=True)
class ResolverConfig:
    """Resolver knobs, from the `resolver` section of rules."""

    description_max_length: int = 155
    default_robots: str = DEFAULT_ROBOTS
    course_path_prefixes: tuple[str, ...] = ("courses", "members")
    product_path_prefix: str = "product"
    platform_site_name: str = "EcomBuildr"
    course_area: CourseAreaRecord = field(default_factory=CourseAreaRecord)

    @classmethod
    def from_rules(cls, rules: Rules) -> ResolverConfig:
        r = rules.resolver
        return cls(
            description_max_length=r.description_max_length,
            default_robots=r.default_robots,
            course_path_prefixes=tuple(r.course_path_prefixes),
            product_path_prefix=r.product_path_prefix,
            platform_site_name=r.platform_site_name,
            course_area=CourseAreaRecord(
                title=r.course_area.title,
                description=r.course_area.description,
                site_name=r.course_area.site_name,
            ),
        )


# --- Field resolution results ---


@dataclass(frozen=True)
class FieldChoice:
    """A resolved field value and the name of the field it came from."""

    value: str | None
    source: str | None = None


@dataclass(frozen=True)
class RequestTarget:
    """Hostname and path a record is being resolved for."""

    hostname: str
    pathname: str
    segments: tuple[str, ...] = ()

    @property
    def is_root(self) -> bool:
        return not self.segments

    @property
    def last_segment(self) -> str:
        return self.segments[-1] if self.segments else ""

    @property
    def clean_path(self) -> str:
        return "/".join(self.segments)
