from .profile import Profile
from .point import Point
from .company_settings import CompanySettings
from .audit import AuditLogEntry
from .absence import Absence
from .device import ActiveDevice

__all__ = ["Profile", "Point", "CompanySettings", "AuditLogEntry", "Absence", "ActiveDevice"]
