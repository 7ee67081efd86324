"""BaseService — foundation for subspacectl services.

Every service receives a :class:`Monorepo` at construction time and turns
domain exceptions into :class:`ServiceResult` failures at its boundary.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from subspacectl.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from subspacectl.domain.errors import SubspaceError
    from subspacectl.infrastructure.monorepo import Monorepo

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes."""

    def __init__(self, monorepo: Monorepo) -> None:
        self._monorepo = monorepo

    @staticmethod
    def _failure(
        op: str,
        exc: SubspaceError,
        *,
        data: dict[str, object] | None = None,
        warnings: list[str] | None = None,
    ) -> ServiceResult:
        logger.debug("%s failed: %s", op, exc)
        return ServiceResult(
            ok=False,
            op=op,
            data=dict(data or {}),
            warnings=list(warnings or []),
            error=ServiceError.from_exception(exc),
        )
