"""Base class for components built from a config model."""

from __future__ import annotations

import importlib.util
from typing import TYPE_CHECKING, ClassVar


if TYPE_CHECKING:
    from typing import Self

    from pydantic import BaseModel


class BaseProvider[TConfig: BaseModel]:
    """Component which round-trips through a pydantic config.

    Subclasses set ``Config`` and implement ``from_config`` / ``to_config``.
    Packages in ``REQUIRED_PACKAGES`` are imported lazily by the component,
    so callers check ``has_required_packages`` before creating one.
    """

    Config: type[TConfig]

    REQUIRED_PACKAGES: ClassVar[set[str]] = set()
    """Distributions the component imports at call time."""

    @classmethod
    def missing_packages(cls) -> list[str]:
        """Names from ``REQUIRED_PACKAGES`` which cannot be imported."""
        return sorted(
            package
            for package in cls.REQUIRED_PACKAGES
            if importlib.util.find_spec(package.replace("-", "_")) is None
        )

    @classmethod
    def has_required_packages(cls) -> bool:
        return not cls.missing_packages()

    @classmethod
    def from_config(cls, config: TConfig) -> Self:
        raise NotImplementedError

    def to_config(self) -> TConfig:
        raise NotImplementedError
