from enum import Enum


class PackageType(str, Enum):
    """
    Delivery type of a pricing package.

    Display only, pricing does not depend on it.
    """

    DIGITAL = "digital"
    PHYSICAL = "physical"
