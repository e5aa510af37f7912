"""Write-side tables for suppliers, quotes, purchase orders and their costs."""

from sqlalchemy import (
    JSON,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)

from database import Base


class Company(Base):
    """Buying entity that owns quotes and purchase orders."""

    __tablename__ = "1.0_companies"

    company_id = Column(Integer, primary_key=True, autoincrement=True)
    legal_name = Column(String, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Supplier(Base):
    __tablename__ = "2.0_suppliers"

    supplier_id = Column(Integer, primary_key=True, autoincrement=True)
    supplier_name = Column(String, nullable=False, index=True)
    supplier_code = Column(String, nullable=True)
    location = Column(String, nullable=True)
    primary_contact_email = Column(String, nullable=True)
    payment_terms_default = Column(String, nullable=True)
    supplier_bank_details = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class Component(Base):
    __tablename__ = "3.0_components"

    component_id = Column(Integer, primary_key=True, autoincrement=True)
    supplier_model = Column(String, nullable=False, index=True, comment="Supplier/manufacturer model number or SKU")
    internal_description = Column(String, nullable=True, comment="Internal description for OEM or custom parts")
    brand = Column(String, nullable=True)
    category = Column(String, nullable=True)
    specifications = Column(JSON, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class PriceQuote(Base):
    __tablename__ = "4.0_price_quotes"

    quote_id = Column(Integer, primary_key=True, autoincrement=True)
    supplier_id = Column(Integer, ForeignKey("2.0_suppliers.supplier_id"), nullable=False, index=True)
    company_id = Column(Integer, ForeignKey("1.0_companies.company_id"), nullable=False, index=True)
    quote_date = Column(Date, nullable=False)
    pi_number = Column(String, nullable=True)
    currency = Column(String(3), nullable=False)
    total_value = Column(Float, nullable=True)
    status = Column(String, nullable=True)
    estimated_lead_time_days = Column(Integer, nullable=True)
    replaces_quote_id = Column(Integer, ForeignKey("4.0_price_quotes.quote_id"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class PriceQuoteLineItem(Base):
    __tablename__ = "4.1_price_quote_line_items"

    quote_line_id = Column(Integer, primary_key=True, autoincrement=True)
    quote_id = Column(Integer, ForeignKey("4.0_price_quotes.quote_id"), nullable=False, index=True)
    component_id = Column(Integer, ForeignKey("3.0_components.component_id"), nullable=False, index=True)
    supplier_description = Column(String, nullable=True)
    quantity = Column(Float, nullable=False)
    unit_price = Column(Float, nullable=False)
    currency = Column(String(3), nullable=False)


class ProformaInvoice(Base):
    __tablename__ = "5.0_proforma_invoices"

    pi_id = Column(Integer, primary_key=True, autoincrement=True)
    quote_id = Column(Integer, ForeignKey("4.0_price_quotes.quote_id"), nullable=True, index=True)
    pi_number = Column(String, nullable=False)
    pi_date = Column(Date, nullable=False)
    status = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Purchase(Base):
    """Purchase order header."""

    __tablename__ = "6.0_purchases"

    po_id = Column(Integer, primary_key=True, autoincrement=True)
    po_number = Column(String, nullable=False, index=True)
    po_date = Column(Date, nullable=False)
    quote_id = Column(Integer, ForeignKey("4.0_price_quotes.quote_id"), nullable=True, index=True)
    incoterms = Column(String, nullable=True)
    method_of_shipment = Column(String, nullable=True)
    currency = Column(String(3), nullable=False)
    exchange_rate = Column(Float, nullable=True, comment="IDR per unit of currency at PO time")
    total_value = Column(Float, nullable=True)
    payment_terms = Column(String, nullable=True)
    freight_charges_intl = Column(Float, nullable=True)
    estimated_delivery_date = Column(Date, nullable=True)
    actual_delivery_date = Column(Date, nullable=True)
    status = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class PurchaseLineItem(Base):
    __tablename__ = "6.1_purchase_line_items"

    po_item_id = Column(Integer, primary_key=True, autoincrement=True)
    po_id = Column(Integer, ForeignKey("6.0_purchases.po_id"), nullable=False, index=True)
    component_id = Column(Integer, ForeignKey("3.0_components.component_id"), nullable=False, index=True)
    supplier_description = Column(String, nullable=True)
    quantity = Column(Float, nullable=False)
    unit_cost = Column(Float, nullable=False)
    currency = Column(String(3), nullable=False)


class POCost(Base):
    """Payments, bank fees and landed costs booked against a purchase order."""

    __tablename__ = "po_costs"

    cost_id = Column(Integer, primary_key=True, autoincrement=True)
    po_id = Column(Integer, ForeignKey("6.0_purchases.po_id", ondelete="CASCADE"), nullable=False, index=True)
    cost_category = Column(String, nullable=False)
    amount = Column(Float, nullable=False)
    currency = Column(String(3), nullable=False)
    payment_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)

    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class PurchaseHistory(Base):
    """Flat quick-entry record of a purchased line."""

    __tablename__ = "purchase_history"

    history_id = Column(Integer, primary_key=True, autoincrement=True)
    po_date = Column(Date, nullable=True)
    po_number = Column(String, nullable=True)
    supplier_id = Column(Integer, ForeignKey("2.0_suppliers.supplier_id"), nullable=True, index=True)
    component_id = Column(Integer, ForeignKey("3.0_components.component_id"), nullable=True)
    brand = Column(String, nullable=True)
    description = Column(String, nullable=True)
    quantity = Column(Float, nullable=True)
    unit_cost = Column(Float, nullable=True)
    currency = Column(String(3), nullable=True)


class QuoteHistory(Base):
    """Flat quick-entry record of a quoted line."""

    __tablename__ = "quote_history"

    history_id = Column(Integer, primary_key=True, autoincrement=True)
    quote_date = Column(Date, nullable=True)
    quote_number = Column(String, nullable=True)
    supplier_id = Column(Integer, ForeignKey("2.0_suppliers.supplier_id"), nullable=True, index=True)
    component_id = Column(Integer, ForeignKey("3.0_components.component_id"), nullable=True)
    brand = Column(String, nullable=True)
    description = Column(String, nullable=True)
    quantity = Column(Float, nullable=True)
    unit_cost = Column(Float, nullable=True)
    currency = Column(String(3), nullable=True)
