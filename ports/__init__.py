from .repos import FounderStorePort, CompanyLookupPort

__all__ = [
    "FounderStorePort",
    "CompanyLookupPort",
]
