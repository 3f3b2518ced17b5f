"""
Pytest Configuration and Shared Fixtures

This file contains pytest configuration and fixtures that are available
to all test modules. MRZ samples are the ICAO 9303 specimen documents
(issuing state "UTO") unless noted otherwise.
"""

import pytest

TD3_LINE_1 = "P<UTOERIKSSON<<ANNA<MARIA<<<<<<<<<<<<<<<<<<<"
TD3_LINE_2 = "L898902C36UTO7408122F1204159ZE184226B<<<<<10"

TD1_LINE_1 = "I<UTOD231458907<<<<<<<<<<<<<<<"
TD1_LINE_2 = "7408122F1204159UTO<<<<<<<<<<<6"
TD1_LINE_3 = "ERIKSSON<<ANNA<MARIA<<<<<<<<<<"

TD2_LINE_1 = "I<UTOERIKSSON<<ANNA<MARIA<<<<<<<<<<<"
TD2_LINE_2 = "D231458907UTO7408122F1204159<<<<<<<6"


@pytest.fixture
def td3_text():
    """Fixture providing a two-line TD3 passport MRZ."""
    return f"{TD3_LINE_1}\n{TD3_LINE_2}"


@pytest.fixture
def td1_text():
    """Fixture providing a three-line TD1 ID card MRZ."""
    return f"{TD1_LINE_1}\n{TD1_LINE_2}\n{TD1_LINE_3}"


@pytest.fixture
def td2_text():
    """Fixture providing a two-line TD2 ID card MRZ."""
    return f"{TD2_LINE_1}\n{TD2_LINE_2}"


@pytest.fixture
def scenario_passport_text():
    """Fixture providing a passport frame whose line 2 lost its first check digit."""
    return (
        "P<NNNDOE<<JOHN<<<<<<<<<<<<<<<<<<<<<<<<<<<<\n"
        "AB1234567NNN9001015M3001017<<<<<<<<<<<<<<04"
    )


@pytest.fixture
def non_mrz_text():
    """Fixture providing OCR text of a frame without an MRZ in view."""
    return "REPUBLIC OF UTOPIA\nPASSPORT\nSurname / Nom\nERIKSSON"
