from pydantic import BaseModel, Field, model_validator


class TrashRules(BaseModel):
    ttl_days: int = Field(default=30, gt=0)
    # Items within this many days of the TTL count as "near expiry"
    expiry_warning_days: int = Field(default=5, ge=0)
    default_list_limit: int = Field(default=50, gt=0)
    unknown_project_name: str = "Unknown Project"

    @model_validator(mode="after")
    def _warning_within_ttl(self) -> "TrashRules":
        if self.expiry_warning_days > self.ttl_days:
            raise ValueError("expiry_warning_days must not exceed ttl_days")
        return self

    @property
    def near_expiry_days(self) -> int:
        return self.ttl_days - self.expiry_warning_days


class AutosaveRules(BaseModel):
    quiet_period_seconds: float = Field(default=1.0, gt=0)


class PlatformRules(BaseModel):
    requires_title: bool = True
    max_title_length: int | None = None
    max_content_length: int | None = None


class PublishRules(BaseModel):
    clear_error_on_success: bool = False
    default_kind: str = "self"
    platforms: dict[str, PlatformRules] = Field(default_factory=dict)

    def for_platform(self, platform: str | None) -> PlatformRules:
        if platform and platform in self.platforms:
            return self.platforms[platform]
        return PlatformRules()


class SchedulerRules(BaseModel):
    publish_poll_seconds: float = Field(default=60.0, gt=0)
    sweep_hour_utc: int = Field(default=2, ge=0, le=23)
    sweep_minute_utc: int = Field(default=0, ge=0, le=59)
    max_posts_per_tick: int = Field(default=50, gt=0)


class OpsRules(BaseModel):
    required_env: list[str] = Field(default_factory=list)


class Rules(BaseModel):
    rules_version: str
    trash: TrashRules = Field(default_factory=TrashRules)
    autosave: AutosaveRules = Field(default_factory=AutosaveRules)
    publish: PublishRules = Field(default_factory=PublishRules)
    scheduler: SchedulerRules = Field(default_factory=SchedulerRules)
    ops: OpsRules = Field(default_factory=OpsRules)


def default_rules() -> Rules:
    return Rules(rules_version="default")
