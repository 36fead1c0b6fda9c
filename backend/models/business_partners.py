from sqlalchemy import Column, Integer, String, Text, Enum, Boolean, UniqueConstraint
from database import Base
import enum
from models.audit_mixin import TimestampMixin

class PartnerStatus(enum.Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    BLOCKED = "Blocked"

class BusinessPartner(Base, TimestampMixin):
    """A customer, a vendor, or both."""
    __tablename__ = "business_partners"
    __table_args__ = (UniqueConstraint('tenant_id', 'name', name='_tenant_partner_name_uc'),)

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True)
    name = Column(String, nullable=False)
    contact_name = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    address = Column(Text, nullable=True)
    email = Column(String, nullable=True)
    status = Column(Enum(PartnerStatus), default=PartnerStatus.ACTIVE, nullable=False)
    is_vendor = Column(Boolean, default=True, nullable=False)
    is_customer = Column(Boolean, default=True, nullable=False)
