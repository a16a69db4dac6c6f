"""
Source configuration for the three county-level input tables.

Canonical keys (aligned across tables):
- State: state name as written in the county characteristics table
- County: county name without the ' County' / ' Parish' suffix

Every table is read once per run from a local export of the hosted dataset.
`query` records the equivalent SQL against the hosted source; it is not executed.

Tables:
- county_characteristics: anchor (left) table, one row per county
- party_registration: registration snapshot, filtered to a single year/month
- election_results: 2016 presidential results per county
"""

KEY_COLUMNS = ["State", "County"]

SOURCES = {
    # ---- Anchor table (dataset A) ----
    "county_characteristics": {
        "path": "data/raw_data/county_characteristics.csv",
        "format": "csv",
        "query": "SELECT * FROM CountyCharacteristics",
        "keys": {"State": "State", "County": "County"},
    },
    # ---- Registration snapshot (dataset B) ----
    "party_registration": {
        "path": "data/raw_data/party_registration.csv",
        "format": "csv",
        "query": "SELECT * FROM PartyRegistration WHERE Year = 2016 AND Month = 11",
        "keys": {"State": "State", "County": "County"},
        "filters": {"Year": 2016, "Month": 11},
        # identifying / snapshot columns that would collide after the merge
        "drop_columns": ["CountyName", "StateAbbr", "Year", "Month"],
        "rename": {"Total": "TotalRegistered"},
        "overlap_suffix": "Reg",
    },
    # ---- Election results (dataset C) ----
    "election_results": {
        "path": "data/raw_data/presidential_election_results_2016.csv",
        "format": "csv",
        "query": "SELECT * FROM PresidentialElectionResults2016",
        "keys": {"State": "State", "County": "County"},
        "overlap_suffix": "Results",
    },
}
