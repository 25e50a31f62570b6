import json
from pathlib import Path

import pytest

from draftdestiny.config import Settings
from draftdestiny.services.reference_cache import reset_reference_cache


@pytest.fixture(autouse=True)
def clear_reference_cache():
    """Drop the shared reference cache between tests."""
    reset_reference_cache()
    yield
    reset_reference_cache()


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings pointing at a temporary data directory and fake source URLs."""
    return Settings(
        data_dir=tmp_path / "data",
        cardinfo_url="https://ygo.test/cardinfo.php",
        cardsets_url="https://ygo.test/cardsets.php",
        banlists_url="https://ygo.test/TCG.lflist.conf",
        vercheck_url="https://ygo.test/checkDBVer.php",
    )


@pytest.fixture
def cardinfo_payload() -> str:
    """Cards 1 and 2 in "Set A", card 3 in "Set B"; card 1 lists Set A twice."""
    return json.dumps(
        {
            "data": [
                {
                    "id": 1,
                    "name": "Blue-Eyes White Dragon",
                    "type": "Normal Monster",
                    "frameType": "normal",
                    "desc": "This legendary dragon is a powerful engine of destruction.",
                    "atk": 3000,
                    "def": 2500,
                    "level": 8,
                    "race": "Dragon",
                    "attribute": "LIGHT",
                    "archetype": "Blue-Eyes",
                    "card_sets": [
                        {"set_name": "Set A", "set_code": "SA-001", "set_rarity": "Ultra Rare"},
                        {"set_name": "Set A", "set_code": "SA-001", "set_rarity": "Secret Rare"},
                    ],
                },
                {
                    "id": 2,
                    "name": "Pot of Greed",
                    "type": "Spell Card",
                    "desc": "Draw 2 cards.",
                    "race": "Normal",
                    "card_sets": [
                        {"set_name": "Set A", "set_code": "SA-002", "set_rarity": "Rare"},
                    ],
                },
                {
                    "id": 3,
                    "name": "Decode Talker",
                    "type": "Link Monster",
                    "desc": "2+ Effect Monsters",
                    "atk": 2300,
                    "race": "Cyberse",
                    "attribute": "DARK",
                    "linkval": 3,
                    "card_sets": [
                        {"set_name": "Set B", "set_code": "SB-001", "set_rarity": "Common"},
                    ],
                },
                {
                    "id": 4,
                    "name": "Token",
                    "type": "Token",
                    "desc": "Special Summoned by a card effect.",
                    "race": "Warrior",
                },
            ]
        }
    )


@pytest.fixture
def cardsets_payload() -> str:
    return json.dumps(
        [
            {"set_name": "Set A", "set_code": "SA", "num_of_cards": 2, "tcg_date": "2002-03-08"},
            {"set_name": "Set B", "set_code": "SB", "num_of_cards": 1, "tcg_date": "2017-10-20"},
            {"set_name": "Set C", "set_code": "SC", "num_of_cards": 60},
        ]
    )


@pytest.fixture
def banlists_text() -> str:
    return (
        "#[2024.4 TCG][2024.1 TCG]\n"
        "!2024.4 TCG\n"
        "#Forbidden\n"
        "2 0 --Pot of Greed\n"
        "#Limited\n"
        "1 1 --Blue-Eyes White Dragon\n"
        "!2024.1 TCG\n"
        "3 2 --Decode Talker\n"
    )


@pytest.fixture
def version_payload() -> str:
    return json.dumps([{"database_version": "114.37", "last_update": "2024-06-01 12:00:00"}])
