"""
Catalog enumerations: third-party relations and article/line types.
"""

CLIENT = "client"
SUPPLIER = "supplier"
BOTH = "both"

RELATION_VALUES = (CLIENT, SUPPLIER, BOTH)

# Relations that may appear as invoice counterpart / purchase-order supplier
CLIENT_RELATIONS = (CLIENT, BOTH)
SUPPLIER_RELATIONS = (SUPPLIER, BOTH)

PRODUCT = "Product"
SERVICE = "Service"

LINE_TYPE_VALUES = (PRODUCT, SERVICE)
