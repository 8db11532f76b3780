# This project was developed with assistance from AI tools.
"""Shared route dependencies."""

from typing import Annotated

from fastapi import Depends, Query

from ..services.lifecycle import LifecycleCoordinator, get_lifecycle_service

Coordinator = Annotated[LifecycleCoordinator, Depends(get_lifecycle_service)]


class Page:
    """Offset/limit query parameters shared by list endpoints."""

    def __init__(
        self,
        offset: int = Query(default=0, ge=0),
        limit: int = Query(default=20, ge=1, le=100),
    ):
        self.offset = offset
        self.limit = limit

    def slice(self, items: list) -> list:
        return items[self.offset : self.offset + self.limit]


PageParams = Annotated[Page, Depends()]
