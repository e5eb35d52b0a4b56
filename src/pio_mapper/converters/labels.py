"""One-line display labels for drop-downs and the address book."""

from typing import Optional

from pio_mapper.converters.name import family_string, name_text
from pio_mapper.models.common import Address, Name, Telecom


def name_label(name: Optional[Name]) -> str:
    """Label of a name, or "" if it has no family name.

    Example:
        >>> name_label(Name(family_name="Bergen", particle="von", prefix="Dr.", given_name="Eva"))
        'Dr. von Bergen, Eva'
    """
    if name is None or not name.family_name:
        return ""
    family = family_string(name.family_name, name.particle, name.addition)
    return name_text(family, name.prefix, name.given_name)


def address_label(address: Optional[Address]) -> str:
    """Label of an address, prefixed by its upper-cased use (``OTHER`` if unset)."""
    if address is None:
        return ""
    city = " ".join(part for part in (address.city, address.postal_code) if part) if address.city else ""
    if address.post_office_box_radio == "true" or address.post_office_box_number:
        first = f"Postfach {address.post_office_box_number}" if address.post_office_box_number else ""
    elif address.street:
        locator = f"({address.additional_locator})" if address.additional_locator else None
        first = " ".join(part for part in (address.street, address.house_number, locator) if part)
    else:
        first = ""
    use = address.use.upper() if address.use else "OTHER"
    return f"{use}: {', '.join(part for part in (first, city) if part)}"


def telecom_label(telecoms: list[Telecom]) -> str:
    """``system: value`` pairs of all non-empty contact points, comma separated."""
    return ", ".join(f"{telecom.system}: {telecom.value}" for telecom in telecoms if telecom.value)
