# enquiry_app/models/enquiry/enums.py
"""
Enums for enquiry models.
"""

import enum


class MarketType(str, enum.Enum):
    """Market segment enumeration"""

    DOMESTIC = "Domestic"
    EXPORT = "Export"


class ProductType(str, enum.Enum):
    """Product type enumeration"""

    SP = "SP"
    NSP = "NSP"
    SP_NSP = "SP+NSP"
    OTHER = "Other"


class DepartmentStatus(str, enum.Enum):
    """Progress of a department's work on an enquiry"""

    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    NOT_REQUIRED = "Not Required"


class ManufacturingType(str, enum.Enum):
    """Scope of supply enumeration"""

    INHOUSE = "Inhouse"
    BROUGHTOUT = "Broughtout"
    BOTH = "Both"


class EnquiryStatus(str, enum.Enum):
    """Enquiry open/closed state"""

    OPEN = "Open"
    CLOSED = "Closed"


class ActivityType(str, enum.Enum):
    """Current commercial activity on an enquiry"""

    QUOTED = "Quoted"
    REGRETTED = "Regretted"
    IN_PROGRESS = "In Progress"
    ON_HOLD = "On Hold"
