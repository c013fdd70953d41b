"""
Registro de todos los modelos en Base.metadata (create_all y Alembic)
"""
from dinamicbar.modules.auth.models import User  # noqa: F401
from dinamicbar.modules.store.models import Store  # noqa: F401
from dinamicbar.modules.categories.models import Category  # noqa: F401
from dinamicbar.modules.products.models import Product  # noqa: F401
from dinamicbar.modules.suppliers.models import Supplier  # noqa: F401
from dinamicbar.modules.purchases.models import Purchase, PurchaseItem  # noqa: F401
from dinamicbar.modules.tables.models import TableGroup, Table  # noqa: F401
from dinamicbar.modules.tabs.models import Tab, TabItem, Payment  # noqa: F401
from dinamicbar.modules.sales.models import Sale, SaleItem  # noqa: F401
from dinamicbar.modules.cash_register.models import CashRegister, CashTransaction  # noqa: F401
from dinamicbar.modules.vouchers.models import Voucher  # noqa: F401
