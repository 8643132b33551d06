from .models import (
    AllocationFinancials,
    ProjectFinancials,
    ResourceFinancials,
)
from .service import FinancialService

__all__ = [
    "FinancialService",
    "AllocationFinancials",
    "ResourceFinancials",
    "ProjectFinancials",
]
