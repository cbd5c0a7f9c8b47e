"""Config settings – Settings base class."""
from __future__ import annotations

import dataclasses
from typing import ClassVar


@dataclasses.dataclass
class Settings:
    """Base class for 12-factor settings.

    Subclasses are dataclasses whose fields map one-to-one onto environment
    variables named ``<_prefix>_<FIELD>``.  Cross-field rules go in
    :meth:`_validate`, which runs on construction so an invalid instance
    never exists.
    """

    _prefix: ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Override to add cross-field validation."""

    @classmethod
    def env_key(cls, field_name: str) -> str:
        """Environment variable that feeds *field_name*."""
        return f"{cls._prefix}_{field_name}".upper().lstrip("_")

    @classmethod
    def env_keys(cls) -> dict[str, str]:
        """``{field_name: env_var}`` for every field."""
        return {f.name: cls.env_key(f.name) for f in dataclasses.fields(cls)}


__all__ = ["Settings"]
