"""Address converter.

Street, house number, additional locator and post office box number are
stored as extensions below ``line``; the district is a top-level extension
of the address. A post office box address never carries street level parts.
"""

import logging
from typing import Optional

from pio_mapper.document.primitives import CodeValue, StringValue, UriValue
from pio_mapper.document.tree import SubTree, join_path
from pio_mapper.models.common import Address
from pio_mapper.terminology.codes import check_code
from pio_mapper.terminology.resolver import TerminologyResolver
from pio_mapper.terminology.urls import AddressExtension, ValueSetUrl

logger = logging.getLogger(__name__)

POSTAL_TYPE = "postal"
BOTH_TYPE = "both"


def is_post_office_box(address: Address) -> bool:
    return bool(address.post_office_box_number)


def address_line(address: Address) -> str:
    """Summary of the ``line`` element.

    Example:
        >>> address_line(Address(street="Hauptstr.", house_number="5", additional_locator="Hinterhaus"))
        'Hauptstr. 5, Hinterhaus'
    """
    if is_post_office_box(address):
        return address.post_office_box_number or ""
    line = f"{address.street or ''} {address.house_number or ''}".strip()
    if address.additional_locator:
        line = f"{line}, {address.additional_locator}" if line else address.additional_locator
    return line


def address_text(address: Address) -> str:
    """Summary of the whole address: ``line, district, postalCode city, country``."""
    postal_and_city = f"{address.postal_code or ''} {address.city or ''}".strip()
    parts = [address_line(address), address.district, postal_and_city, address.country]
    return ", ".join(part for part in parts if part)


def _line_parts(address: Address) -> list[tuple[str, Optional[str]]]:
    if is_post_office_box(address):
        return [(AddressExtension.POST_OFFICE_BOX, address.post_office_box_number)]
    return [
        (AddressExtension.STREET, address.street),
        (AddressExtension.HOUSE_NUMBER, address.house_number),
        (AddressExtension.ADDITIONAL_LOCATOR, address.additional_locator),
    ]


def _address_to_tree(address: Address, path: str) -> SubTree:
    fragment = SubTree(path)
    post_office_box = is_post_office_box(address)
    if post_office_box and (address.street or address.house_number or address.additional_locator):
        logger.debug(f"Dropping street level parts of post office box address at {path}")

    if address.use:
        fragment.set_value("use", CodeValue(address.use))
    fragment.set_value("type", CodeValue(POSTAL_TYPE if post_office_box else BOTH_TYPE))

    index = 0
    for url, value in _line_parts(address):
        if not value:
            continue
        extension_path = f"line.extension[{index}]"
        fragment.set_value(extension_path, UriValue(url))
        fragment.set_value(join_path(extension_path, "valueString"), StringValue(value))
        index += 1
    line = address_line(address)
    if line:
        fragment.set_value("line", StringValue(line))

    if address.district:
        fragment.set_value("extension[0]", UriValue(AddressExtension.DISTRICT))
        fragment.set_value("extension[0].valueString", StringValue(address.district))
    if address.postal_code:
        fragment.set_value("postalCode", StringValue(address.postal_code))
    if address.city:
        fragment.set_value("city", StringValue(address.city))
    if address.country:
        fragment.set_value("country", StringValue(address.country))

    text = address_text(address)
    if text:
        fragment.set_value("text", StringValue(text))
    return fragment


def addresses_to_trees(addresses: list[Address], base_path: str) -> list[SubTree]:
    """Convert addresses into ``address[n]`` fragments below ``base_path``.

    Args:
        addresses: Addresses in emission order
        base_path: Absolute path of the owning resource

    Returns:
        One fragment per address
    """
    return [
        _address_to_tree(address, join_path(base_path, f"address[{index}]"))
        for index, address in enumerate(addresses)
    ]


def _read_line_part(fragment: SubTree, url: str) -> Optional[str]:
    for extension in fragment.get_repeated("line.extension"):
        if extension.get_value_as_string() == url:
            return extension.get_value_as_string("valueString")
    return None


def addresses_from_trees(fragments: list[SubTree], resolver: TerminologyResolver) -> list[Address]:
    """Rebuild addresses from ``address`` fragments.

    The country code is checked against the national country value set;
    unknown codes are kept as they are.
    """
    country_options = resolver.options(ValueSetUrl.COUNTRY)
    addresses = []
    for fragment in fragments:
        post_office_box_number = _read_line_part(fragment, AddressExtension.POST_OFFICE_BOX)
        post_office_box = post_office_box_number is not None
        addresses.append(
            Address(
                use=fragment.get_value_as_string("use"),
                street=None if post_office_box else _read_line_part(fragment, AddressExtension.STREET),
                house_number=(
                    None if post_office_box else _read_line_part(fragment, AddressExtension.HOUSE_NUMBER)
                ),
                additional_locator=(
                    None
                    if post_office_box
                    else _read_line_part(fragment, AddressExtension.ADDITIONAL_LOCATOR)
                ),
                post_office_box_number=post_office_box_number,
                postal_code=fragment.get_value_as_string("postalCode"),
                city=fragment.get_value_as_string("city"),
                district=(
                    fragment.get_value_as_string("extension.valueString")
                    or fragment.get_value_as_string("extension[0].valueString")
                ),
                country=check_code(fragment.get_value_as_string("country"), country_options),
                post_office_box_radio="true" if post_office_box else "false",
            )
        )
    return addresses
