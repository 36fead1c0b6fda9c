from sqlalchemy import Column, Integer, String, Date, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin

class LedgerPosting(Base, TimestampMixin):
    """One side of a double-entry posting. Rows are never updated after insert."""
    __tablename__ = "ledger_postings"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(String, index=True, nullable=False)
    posting_date = Column(Date, nullable=False)
    source_document_type = Column(String(32), nullable=False)
    source_document_id = Column(Integer, nullable=False)
    account_id = Column(Integer, ForeignKey("account_groups.id"), nullable=False)
    direction = Column(String(6), nullable=False)  # debit, credit
    amount = Column(Integer, nullable=False)
    description = Column(String, nullable=True)
    reverses_posting_id = Column(Integer, ForeignKey("ledger_postings.id"), nullable=True)

    # Relationships
    account = relationship("AccountGroup")

    __table_args__ = (
        CheckConstraint('amount >= 0', name='check_posting_amount_non_negative'),
        CheckConstraint("direction IN ('debit', 'credit')", name='check_posting_direction'),
        Index('ix_ledger_postings_reference', 'tenant_id', 'source_document_type', 'source_document_id'),
    )

    @property
    def account_name(self):
        return self.account.name if self.account else None
