from models.account_groups import AccountGroup
from models.app_config import AppConfig
from models.business_partners import BusinessPartner
from models.expense_categories import ExpenseCategory
from models.expenses import Expense
from models.income_categories import IncomeCategory
from models.incomes import Income
from models.ledger_postings import LedgerPosting
from models.payment_in_items import PaymentInItem
from models.payment_ins import PaymentIn
from models.payment_out_items import PaymentOutItem
from models.payment_outs import PaymentOut
from models.purchase_invoice_items import PurchaseInvoiceItem
from models.purchase_invoices import PurchaseInvoice
from models.purchase_returns import PurchaseReturn
from models.sales_invoice_items import SalesInvoiceItem
from models.sales_invoices import SalesInvoice
from models.sales_returns import SalesReturn
from models.transactions import TransactionFeedEntry

__all__ = ['AccountGroup', 'AppConfig', 'BusinessPartner', 'Expense', 'ExpenseCategory', 'Income', 'IncomeCategory', 'LedgerPosting', 'PaymentIn', 'PaymentInItem', 'PaymentOut', 'PaymentOutItem', 'PurchaseInvoice', 'PurchaseInvoiceItem', 'PurchaseReturn', 'SalesInvoice', 'SalesInvoiceItem', 'SalesReturn', 'TransactionFeedEntry',]
