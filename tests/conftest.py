"""Shared map fixtures for trigger graph tests."""

import pytest

SAMPLE_MAP = """; sample map
[Basic]
Name=Test Map

[Triggers]
01000000=Soviet,<none>,MyTrigger,0,1,1,1
01000001=Allied,01000002,Linked A,1,1,0,0
01000002=Allied,<none>,Linked B,0,0,1,0
01000003=Allied,<none>,Untagged,0,1,1,1

[Tags]
02000000=0,MyTrigger 1,01000000
02000001=2,Linked tag,01000001
02000002=1,Ghost tag,09999999

[Events]
01000000=1,36,0,5
01000001=2,27,0,3,13,2,1,7

[Actions]
01000000=2,53,0,01000001,0,0,0,0,A,12,0,01000002,0,0,0,0,A,22,0,01000003,0,0,0,0,A
01000001=1,56,0,5,0,0,0,0,A

[VariableNames]
5=MyLocal,1

[TeamTypes]
0=Team1

[Team1]
Name=Strike team
Script=Script9 ; attack script

[Script9]
0=0,2

[Team1]
Name=Strike team renamed
Priority=5
"""


@pytest.fixture
def sample_map() -> str:
    return SAMPLE_MAP
