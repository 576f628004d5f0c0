from pydantic import BaseModel, Field


class ProjectRules(BaseModel):
    slug: str
    rules_version: str

class CrawlerRules(BaseModel):
    social: list[str]
    search: list[str] = Field(default_factory=list)
    include_search: bool = True

    def tokens(self) -> list[str]:
        """Effective user-agent tokens, social first."""
        return self.social + (self.search if self.include_search else [])

class DomainRules(BaseModel):
    system: list[str]

class CourseAreaRules(BaseModel):
    title: str = "Courses"
    description: str = "Browse our course offerings"
    site_name: str = "Courses"

class ResolverRules(BaseModel):
    description_max_length: int = Field(default=155, ge=40)
    default_robots: str = "index, follow"
    course_path_prefixes: list[str] = Field(default_factory=lambda: ["courses", "members"])
    product_path_prefix: str = "product"
    platform_site_name: str
    course_area: CourseAreaRules = Field(default_factory=CourseAreaRules)

class RenderRules(BaseModel):
    language: str = "en"
    locale: str = "en_US"
    image_width: int = 1200
    image_height: int = 630
    image_type: str = "image/png"
    reload_delay_ms: int = Field(default=1000, ge=0)

class CacheRules(BaseModel):
    resolved_max_age: int = Field(default=300, gt=0)
    fallback_max_age: int = Field(default=120, gt=0)
    shell_max_age: int = Field(default=60, gt=0)

class SpaShellRules(BaseModel):
    title: str
    description: str
    keywords: list[str] = Field(default_factory=list)
    image: str | None = None
    site_name: str
    theme_color: str = "#10B981"
    scripts: list[str] = Field(default_factory=list)
    modulepreloads: list[str] = Field(default_factory=list)
    stylesheets: list[str] = Field(default_factory=list)

class OpsRules(BaseModel):
    required_env: list[str] = Field(default_factory=list)

class Rules(BaseModel):
    project: ProjectRules
    crawlers: CrawlerRules
    domains: DomainRules
    resolver: ResolverRules
    render: RenderRules = Field(default_factory=RenderRules)
    cache: CacheRules = Field(default_factory=CacheRules)
    spa_shell: SpaShellRules
    ops: OpsRules = Field(default_factory=OpsRules)
