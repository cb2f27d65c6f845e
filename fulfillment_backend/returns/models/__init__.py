"""
PATH: returns/models/__init__.py

Returns models export surface.
"""

from .customer_return import CustomerReturn
from .reimbursement import Reimbursement
from .return_authorization import ReturnAuthorization
from .return_item import ReturnItem
from .return_reason import ReturnReason

__all__ = [
    "CustomerReturn",
    "Reimbursement",
    "ReturnAuthorization",
    "ReturnItem",
    "ReturnReason",
]
