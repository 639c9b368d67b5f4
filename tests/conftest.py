"""
Shared fixtures for ndbc tests.
"""

import pytest

from ndbc.cli import reset_logging
from ndbc.config import ClientConfig

HEADER = "#YY  MM DD hh mm WDIR WSPD GST  WVHT   DPD   APD MWD   PRES  ATMP  WTMP  DEWP  VIS PTDY  TIDE"
UNITS = "#yr  mo dy hr mn degT m/s  m/s     m   sec   sec degT   hPa  degC  degC  degC  nmi  hPa    ft"

SAMPLE_REPORT = "\n".join(
    [
        HEADER,
        UNITS,
        "2024 01 15 01 00 260 11.0 14.0   1.5     8   5.2 250 1013.6  14.8  16.2    MM   MM   MM    MM",
        "2024 01 15 00 50 270 12.3 15.1    MM    MM    MM  MM 1013.2  15.0  16.2    MM   MM -1.2    MM",
        "2024 01 15 00 40 MM   MM   MM     MM    MM    MM  MM 1013.0    MM    MM    MM   MM   MM    MM",
    ]
)

METADATA_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<stations created="2024-01-15T00:00:00UTC" count="3">
  <station id="46042" name="MONTEREY" owner="NDBC" pgm="NDBC Meteorological/Ocean" type="buoy">
    <history start="2000-01-01" stop="2010-01-01" lat="36.75" lng="-122.42" met="y"/>
    <history start="2010-01-01" lat="36.79" lng="-122.40" met="y"/>
  </station>
  <station id="42040" name="LUKE OFFSHORE" owner="NDBC" pgm="NDBC Meteorological/Ocean" type="buoy">
    <history start="2005-01-01" lat="29.21" lng="-88.23" met="y"/>
  </station>
  <station id="NOMET" name="WAVES ONLY" owner="NDBC" pgm="NDBC" type="buoy">
    <history start="2005-01-01" lat="10.0" lng="10.0" met="n"/>
  </station>
</stations>
"""


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    reset_logging()


@pytest.fixture
def sample_report() -> str:
    return SAMPLE_REPORT


@pytest.fixture
def metadata_xml() -> bytes:
    return METADATA_XML


@pytest.fixture
def config(tmp_path) -> ClientConfig:
    """Config writing into a temporary directory."""
    return ClientConfig(
        out_dir=str(tmp_path / "data"),
        gitignore_path=str(tmp_path / ".gitignore"),
    )
