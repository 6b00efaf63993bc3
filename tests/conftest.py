import pytest

from covidviz.csv_parser import Table, parse

CONFIRMED_CSV = """Province/State,Country/Region,Lat,Long,1/1/20,1/2/20,1/3/20,1/4/20,1/5/20
North,Testland,10.0,20.0,4,4,6,6,8
South,Testland,20.0,40.0,3,3,5,5,6
,Testland,,,3,3,4,4,6
,"Korea, South",35.9,127.7,1,2,4,8,16
,Zeroland,0,0,0,0,0,0,0
"""

DEATHS_CSV = """Province/State,Country/Region,Lat,Long,1/1/20,1/2/20,1/3/20,1/4/20,1/5/20
North,Testland,10.0,20.0,0,0,1,1,1
South,Testland,20.0,40.0,0,0,0,1,1
,Testland,,,0,0,0,0,0
,"Korea, South",35.9,127.7,0,0,0,0,1
,Zeroland,0,0,0,0,0,0,0
"""


@pytest.fixture
def confirmed() -> Table:
    return parse(CONFIRMED_CSV)


@pytest.fixture
def deaths() -> Table:
    return parse(DEATHS_CSV)
