from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional


@dataclass
class Pagination:
    page: Optional[int] = None
    num_pages: Optional[int] = None
    previous_page: Optional[int] = None
    next_page: Optional[int] = None
    count: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["Pagination"]:
        if not data:
            return None
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class ServicePage:
    services: List[Dict[str, Any]] = field(default_factory=list)
    pagination: Optional[Pagination] = None


@dataclass
class CountryOption:
    value: str
    label: str
    flag: Optional[str] = None


@dataclass
class CurrencyOption:
    value: str
    label: str
    symbol: Optional[str] = None
