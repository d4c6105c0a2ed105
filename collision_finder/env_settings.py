from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings
from pydantic import Field, field_validator


class EnvSettings(BaseSettings):
    clear_password: str = Field("", alias="CLEARPASS")
    cleanup: bool = Field(True, alias="CLEANUP")
    crypt_key: str = Field("", alias="CRYPTKEY")
    crypt_string: str = Field("", alias="CRYPTSTRING")
    # None: decide from whether stderr is a terminal
    debug: Optional[bool] = Field(None, alias="DEBUG")
    join_domain: str = Field("", alias="JOIN_DOMAIN")
    join_user: str = Field("", alias="JOIN_USER")
    log_facility: str = Field("kern.crit", alias="LOGFACIL")
    require_tls: bool = Field(True, alias="REQ_TLS")

    @field_validator("debug", mode="before")
    @classmethod
    def _undef_debug(cls, v):
        if isinstance(v, str) and v.strip().upper() in ("", "UNDEF"):
            return None
        return v

    @field_validator("join_domain", "join_user", "log_facility")
    @classmethod
    def _strip(cls, v: str) -> str:
        return (v or "").strip()

    class Config:
        populate_by_name = True


@lru_cache(maxsize=1)
def get_env() -> EnvSettings:
    return EnvSettings()
