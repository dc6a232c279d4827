"""
Pack definitions crawled for the "챔피언스 저니 4000p" event value chart.

Each definition: seasons, minimum rating, upgrade grade(s), and top-N cap.
Pack names are the display names stored in the report and must stay stable;
a renamed pack is a new pack, and the old one stays in the report.
"""
from typing import Iterable, List, Optional

from core.models.report import PackDefinition


DEFAULT_PACKS: List[PackDefinition] = [
    PackDefinition(
        key="BOE21_TOP_100",
        pack_name="BOE21 클래스 Top Price 100 스페셜팩 (10강, 90+)",
        seasons=[253],
        min_ovr=90,
        grades=[10],
        limit=100,
    ),
    PackDefinition(
        key="MC_TOP_70",
        pack_name="MC 클래스 Top Price 70 스페셜팩 (10강, 90+)",
        seasons=[237],
        min_ovr=90,
        grades=[10],
        limit=70,
    ),
    PackDefinition(
        key="LN_TOP_85",
        pack_name="LN 클래스 Top Price 85 스페셜팩 (9강, 103+)",
        seasons=[268],
        min_ovr=103,
        grades=[9],
        limit=85,
    ),
    PackDefinition(
        key="HG_TOP_90",
        pack_name="HG 클래스 Top Price 90 스페셜팩 (9강, 103+)",
        seasons=[283],
        min_ovr=103,
        grades=[9],
        limit=90,
    ),
    PackDefinition(
        key="RTN_TOP_65",
        pack_name="RTN 클래스 Top Price 65 스페셜팩 (9강, 99+)",
        seasons=[284],
        min_ovr=99,
        grades=[9],
        limit=65,
    ),
    PackDefinition(
        key="LOL_FA_TOP_50",
        pack_name="LOL, FA Top Price 50 스페셜팩 (9강, 103+)",
        seasons=[265, 264],
        min_ovr=103,
        grades=[9],
        limit=50,
    ),
    PackDefinition(
        key="HR22_TOP_110",
        pack_name="22HEROES, BTB 포함 Top Price 110 스페셜팩 (9강, 103+)",
        seasons=[261, 256, 254, 251, 247, 294],
        min_ovr=103,
        grades=[9],
        limit=110,
    ),
    PackDefinition(
        key="COC_OTW_TOP_50",
        pack_name="COC, OTW 포함 Top Price 50 스페셜팩 (10강, 75+)",
        seasons=[217, 218, 210, 207, 206, 201],
        min_ovr=75,
        grades=[10],
        limit=50,
    ),
]


def select_packs(keys: Optional[Iterable[str]] = None) -> List[PackDefinition]:
    """
    Pick pack definitions by key, in the order given.

    Raises:
        KeyError: for an unknown key
    """
    if not keys:
        return list(DEFAULT_PACKS)

    by_key = {definition.key: definition for definition in DEFAULT_PACKS}
    selected = []
    for key in keys:
        if key not in by_key:
            raise KeyError(f"Unknown pack key: {key} (known: {', '.join(by_key)})")
        selected.append(by_key[key])
    return selected
