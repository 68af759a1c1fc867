from ledgerly.app.db.base_class import Base

# Import models to register metadata for Base.metadata.create_all in tests
from ledgerly.app.models.user import User  # noqa: F401
from ledgerly.app.models.business_settings import BusinessSettings  # noqa: F401
from ledgerly.app.models.client import Client  # noqa: F401
from ledgerly.app.models.invoice import Invoice  # noqa: F401
from ledgerly.app.models.line_item_template import LineItemTemplate  # noqa: F401
from ledgerly.app.models.expense import Expense  # noqa: F401
from ledgerly.app.models.mileage import MileageEntry  # noqa: F401
