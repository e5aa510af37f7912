from .supply_chain import (  # noqa: F401
    Company,
    Component,
    POCost,
    PriceQuote,
    PriceQuoteLineItem,
    ProformaInvoice,
    Purchase,
    PurchaseHistory,
    PurchaseLineItem,
    QuoteHistory,
    Supplier,
)
from .analytics_views import analytics_metadata  # noqa: F401
