"""
Shared pytest configuration and fixtures.

This module provides fixtures and configuration used across all test suites
(unit and integration tests).
"""

import logging
from pathlib import Path
from typing import Generator

import pytest

from pio_mapper.document.tree import SubTree
from pio_mapper.models.common import Address, MaidenName, Name, Telecom
from pio_mapper.terminology.resolver import TerminologyResolver

PATIENT_ID = "0b7e4c1a-5d2f-4c3e-9a1b-2f6d8e0c4a11"


@pytest.fixture
def project_root() -> Path:
    """
    Return the project root directory.

    Returns:
        Path: Absolute path to the project root directory.
    """
    return Path(__file__).parent.parent


@pytest.fixture
def patient_id() -> str:
    """Entity uuid of the patient in `empty_document`."""
    return PATIENT_ID


@pytest.fixture
def resolver() -> TerminologyResolver:
    """Terminology resolver over the bundled value set table, without backend."""
    return TerminologyResolver.from_file()


@pytest.fixture
def sample_name() -> Name:
    """A full name with title, particle, addition and birth name."""
    return Name(
        family_name="Bergen",
        given_name="Eva",
        prefix="Dr.",
        particle="von",
        addition="Gräfin",
        maiden_name=MaidenName(family_name="Schulz"),
    )


@pytest.fixture
def sample_address() -> Address:
    """A street address in Germany."""
    return Address(
        use="home",
        street="Hauptstraße",
        house_number="5",
        additional_locator="Hinterhaus",
        postal_code="10115",
        city="Berlin",
        district="Mitte",
        country="D",
    )


@pytest.fixture
def sample_telecoms() -> list[Telecom]:
    """Phone and e-mail contact points with their labels."""
    return [
        Telecom(system="phone", value="030 1234567", label="Telefon"),
        Telecom(system="email", value="eva@example.de", label="E-Mail"),
    ]


@pytest.fixture
def empty_document() -> SubTree:
    """A document root holding only the patient."""
    document = SubTree("")
    patient = SubTree(f"{PATIENT_ID}.KBV_PR_MIO_ULB_Patient")
    document.add_child(SubTree(PATIENT_ID))
    document.get_sub_tree(PATIENT_ID).add_child(patient)
    return document


@pytest.fixture
def reset_logging() -> Generator[None, None, None]:
    """Remove root handlers installed by configure_logging after the test."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    for handler in list(root_logger.handlers):
        if handler not in handlers:
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(level)
