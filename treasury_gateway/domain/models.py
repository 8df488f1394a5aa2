"""Shared value objects used by both banking and treasury entities"""

from dataclasses import dataclass


@dataclass
class Address:
    """Physical address"""

    street: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    postal_code: str = ""
