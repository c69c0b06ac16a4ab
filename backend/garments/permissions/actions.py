# Overview: All guarded actions and the audience each one is open to.
# Each action is defined as: (code, name, description, audience)

from enum import Enum


class Action(str, Enum):
    VIEW_CATALOG = "VIEW_CATALOG"
    VIEW_HOME_PRODUCTS = "VIEW_HOME_PRODUCTS"

    VIEW_OWN_ACCOUNT = "VIEW_OWN_ACCOUNT"
    PLACE_ORDER = "PLACE_ORDER"
    VIEW_ORDERS = "VIEW_ORDERS"
    UPDATE_ORDER_STATUS = "UPDATE_ORDER_STATUS"
    EDIT_PRODUCT = "EDIT_PRODUCT"
    DELETE_PRODUCT = "DELETE_PRODUCT"

    CREATE_PRODUCT = "CREATE_PRODUCT"
    TRACK_ORDER = "TRACK_ORDER"
    RESTOCK_PRODUCT = "RESTOCK_PRODUCT"

    LIST_ACCOUNTS = "LIST_ACCOUNTS"
    MANAGE_ACCOUNTS = "MANAGE_ACCOUNTS"
    VIEW_ANALYTICS = "VIEW_ANALYTICS"


class Audience(str, Enum):
    PUBLIC = "PUBLIC"
    AUTHENTICATED = "AUTHENTICATED"
    MANAGER = "MANAGER"
    ADMIN = "ADMIN"


# -- PUBLIC --

PUBLIC_ACTIONS = [
    (
        Action.VIEW_CATALOG,
        "View Catalog",
        "Browse product listings and product detail",
        Audience.PUBLIC,
    ),
    (
        Action.VIEW_HOME_PRODUCTS,
        "View Home Products",
        "Read the home-page product highlights",
        Audience.PUBLIC,
    ),
]


# -- ANY AUTHENTICATED ACCOUNT --

ACCOUNT_ACTIONS = [
    (
        Action.VIEW_OWN_ACCOUNT,
        "View Own Account",
        "Read the caller's own account record",
        Audience.AUTHENTICATED,
    ),
    (
        Action.PLACE_ORDER,
        "Place Order",
        "Create an order, reserving product stock",
        Audience.AUTHENTICATED,
    ),
    (
        Action.VIEW_ORDERS,
        "View Orders",
        "Read orders",
        Audience.AUTHENTICATED,
    ),
    (
        Action.UPDATE_ORDER_STATUS,
        "Update Order Status",
        "Approve, deliver or cancel an order",
        Audience.AUTHENTICATED,
    ),
    (
        Action.EDIT_PRODUCT,
        "Edit Product",
        "Change descriptive product fields",
        Audience.AUTHENTICATED,
    ),
    (
        Action.DELETE_PRODUCT,
        "Delete Product",
        "Delete a product with no open orders",
        Audience.AUTHENTICATED,
    ),
]


# -- MANAGER (not suspended) --

MANAGER_ACTIONS = [
    (
        Action.CREATE_PRODUCT,
        "Create Product",
        "Add a product to the catalog",
        Audience.MANAGER,
    ),
    (
        Action.TRACK_ORDER,
        "Track Order",
        "Append a tracking event to an order",
        Audience.MANAGER,
    ),
    (
        Action.RESTOCK_PRODUCT,
        "Restock Product",
        "Increase a product's available quantity",
        Audience.MANAGER,
    ),
]


# -- ADMIN --

ADMIN_ACTIONS = [
    (
        Action.LIST_ACCOUNTS,
        "List Accounts",
        "List and search every account",
        Audience.ADMIN,
    ),
    (
        Action.MANAGE_ACCOUNTS,
        "Manage Accounts",
        "Change any account's role or status",
        Audience.ADMIN,
    ),
    (
        Action.VIEW_ANALYTICS,
        "View Analytics",
        "Read the reporting view",
        Audience.ADMIN,
    ),
]


ACTION_DEFINITIONS = (
    PUBLIC_ACTIONS
    + ACCOUNT_ACTIONS
    + MANAGER_ACTIONS
    + ADMIN_ACTIONS
)

ACTION_AUDIENCE = {code: audience for code, _, _, audience in ACTION_DEFINITIONS}
