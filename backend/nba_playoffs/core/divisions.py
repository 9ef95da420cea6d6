"""
NBA divisions and the conference each belongs to.
"""

from typing import Optional


DIVISION_CONFERENCES = {
    "Atlantic": "Eastern",
    "Central": "Eastern",
    "Southeast": "Eastern",
    "Northwest": "Western",
    "Pacific": "Western",
    "Southwest": "Western",
}


def division_conference(division: str) -> Optional[str]:
    """Conference for a division name (case-insensitive), or None if it isn't one."""
    for name, conference in DIVISION_CONFERENCES.items():
        if name.lower() == division.strip().lower():
            return conference
    return None
