from sqlalchemy import Column, Integer, String, Date, Text, UniqueConstraint
from database import Base
from models.audit_mixin import TimestampMixin

class TransactionFeedEntry(Base, TimestampMixin):
    """Denormalized activity row mirroring one source document."""
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True, nullable=False)
    transaction_type = Column(String(32), nullable=False)
    reference_type = Column(String(32), nullable=False)
    reference_id = Column(Integer, nullable=False)
    amount = Column(Integer, nullable=False)  # positive for inflows, negative for outflows
    date = Column(Date, nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(20), default='pending')
    payment_method = Column(String, nullable=True)
    reference_number = Column(String, nullable=True)

    __table_args__ = (
        UniqueConstraint('tenant_id', 'reference_type', 'reference_id', name='_tenant_transaction_reference_uc'),
    )
