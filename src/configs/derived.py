"""
Derived-column plan for the joined county table.

Steps run in list order. A step may only read raw input columns or columns
written by an earlier step; `derive.validate_steps` enforces this.

Ops:
- sum:        row sum of `columns` (missing if any component is missing)
- ratio:      sum(`numerator`) / `denominator`; missing where the denominator is 0 or missing.
              `missing_if_zero` lists extra columns whose zero value makes the result missing.
- complement: 1 - `column`
- threshold:  `column` > `value` (strict), nullable boolean

Denominator bases (never mix them):
- TotalPopulation:       sex, age share, race, labor force participation
- totalAdultsWithTeens:  marital status (survey universe is 15+)
- totalAdultsNoTeens:    educational attainment (25+ universe, approximated by 20+), turnout
- LaborForce:            manufacturing employment, unemployment
- TotalRegistered:       party registration shares
- totalvotes:            minor-party vote shares
"""

CHILD_AGE_COLUMNS = ["Age0_4", "Age5_9", "Age10_14", "Age15_19"]
ADULT_AGE_COLUMNS_NO_TEENS = [
    "Age20_24",
    "Age25_29",
    "Age30_34",
    "Age35_39",
    "Age40_44",
    "Age45_49",
    "Age50_54",
    "Age55_59",
    "Age60_64",
    "Age65_69",
    "Age70_74",
    "Age75_79",
    "Age80_84",
    "Age85plus",
]
ADULT_AGE_COLUMNS_WITH_TEENS = ["Age15_19"] + ADULT_AGE_COLUMNS_NO_TEENS
ELDER_AGE_COLUMNS = ["Age75_79", "Age80_84", "Age85plus"]
ALL_AGE_COLUMNS = CHILD_AGE_COLUMNS + ADULT_AGE_COLUMNS_NO_TEENS

NO_HS_COLUMNS = ["Edu_K8", "Edu_9_12"]
HS_COLUMNS = ["Edu_HS"]
MORE_THAN_HS_COLUMNS = ["Edu_SomeCollege", "Edu_Associate", "Edu_Bachelor", "Edu_Graduate"]

# minor-party vote counts, each divided by totalvotes
MINOR_CANDIDATE_COLUMNS = {"propStein": "stein", "propJohnson": "johnson", "propMcMullin": "mcmullin"}

DERIVED_COLUMNS = [
    # ---- Population bases ----
    {"name": "totalAdultsWithTeens", "op": "sum", "columns": ADULT_AGE_COLUMNS_WITH_TEENS},
    {"name": "totalAdultsNoTeens", "op": "sum", "columns": ADULT_AGE_COLUMNS_NO_TEENS},
    # ---- Sex / age ----
    {"name": "propFemale", "op": "ratio", "numerator": "Female", "denominator": "TotalPopulation"},
    {"name": "propKids", "op": "ratio", "numerator": CHILD_AGE_COLUMNS, "denominator": "TotalPopulation"},
    {"name": "propAdultsNoTeens", "op": "complement", "column": "propKids"},
    {"name": "propElders", "op": "ratio", "numerator": ELDER_AGE_COLUMNS, "denominator": "TotalPopulation"},
    # ---- Marital status ----
    {"name": "propNeverMarried", "op": "ratio", "numerator": "NeverMarried", "denominator": "totalAdultsWithTeens"},
    {"name": "propMarried", "op": "ratio", "numerator": "Married", "denominator": "totalAdultsWithTeens"},
    # ---- Race / ethnicity ----
    {"name": "propWhite", "op": "ratio", "numerator": "White", "denominator": "TotalPopulation"},
    {"name": "propBlack", "op": "ratio", "numerator": "Black", "denominator": "TotalPopulation"},
    {"name": "propHispanic", "op": "ratio", "numerator": "Hispanic", "denominator": "TotalPopulation"},
    {"name": "propAsian", "op": "ratio", "numerator": "Asian", "denominator": "TotalPopulation"},
    {"name": "majorityWhite", "op": "threshold", "column": "propWhite", "value": 0.5},
    {"name": "majorityBlack", "op": "threshold", "column": "propBlack", "value": 0.5},
    # ---- Education ----
    {"name": "propNoHS", "op": "ratio", "numerator": NO_HS_COLUMNS, "denominator": "totalAdultsNoTeens"},
    {"name": "propHS", "op": "ratio", "numerator": HS_COLUMNS, "denominator": "totalAdultsNoTeens"},
    {"name": "propMoreHS", "op": "ratio", "numerator": MORE_THAN_HS_COLUMNS, "denominator": "totalAdultsNoTeens"},
    # ---- Economy ----
    {"name": "propManufacturing", "op": "ratio", "numerator": "ManufacturingEmp2015", "denominator": "LaborForce"},
    {"name": "propUnemployed", "op": "ratio", "numerator": "Unemployment", "denominator": "LaborForce"},
    {"name": "propInLaborForce", "op": "ratio", "numerator": "LaborForce", "denominator": "TotalPopulation"},
    # ---- Party registration (Nov 2016 snapshot) ----
    {"name": "propDemocratsReg", "op": "ratio", "numerator": "Democrats", "denominator": "TotalRegistered"},
    {"name": "propRepublicansReg", "op": "ratio", "numerator": "Republicans", "denominator": "TotalRegistered"},
    {"name": "propLibertariansReg", "op": "ratio", "numerator": "Libertarians", "denominator": "TotalRegistered"},
    {"name": "propGreenReg", "op": "ratio", "numerator": "Green", "denominator": "TotalRegistered"},
    {"name": "propUnaffiliatedReg", "op": "ratio", "numerator": "Unaffiliated", "denominator": "TotalRegistered"},
    # ---- 2016 presidential results ----
    *[
        {"name": name, "op": "ratio", "numerator": votes, "denominator": "totalvotes"}
        for name, votes in MINOR_CANDIDATE_COLUMNS.items()
    ],
    # zero total votes means the county reported no results, not zero turnout
    {
        "name": "propVoters",
        "op": "ratio",
        "numerator": "totalvotes",
        "denominator": "totalAdultsNoTeens",
        "missing_if_zero": ["totalvotes"],
    },
    {"name": "votedTrump", "op": "threshold", "column": "rPct", "value": 0.5},
]
