from .complaints import (
    Complaint,
    STATUS_ALL,
    STATUS_COMPLETED,
    STATUS_PENDING,
    STATUSES,
)

__all__ = [
    'Complaint',
    'STATUS_ALL', 'STATUS_COMPLETED', 'STATUS_PENDING', 'STATUSES',
]
