from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Site


class SiteRepository(Protocol):
    def list_active(self, *, tenant_id: int) -> Sequence[Site]:
        raise NotImplementedError

    def get_by_id(self, site_id: int) -> Optional[Site]:
        raise NotImplementedError
