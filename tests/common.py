# -*- encoding: utf-8 -*-
"""Shared execution fixture: restaurant franchise fees by location state and
city in rows, by year and month in columns, four measures."""

from pivotgrid.execution import Execution

PROJECT = "/gdc/md/storybook"


def obj_uri(object_id):
    return f"{PROJECT}/obj/{object_id}"


def element_uri(attribute_id, element_id):
    return f"{PROJECT}/obj/{attribute_id}/elements?id={element_id}"


STATE_HEADER = {
    "attributeHeader": {
        "localIdentifier": "state",
        "identifier": "label.restaurantlocation.locationstate",
        "uri": obj_uri(2211),
        "name": "Location State",
        "formOf": {
            "uri": obj_uri(2210),
            "identifier": "attr.restaurantlocation.locationstate",
            "name": "Location State",
        },
    }
}

CITY_HEADER = {
    "attributeHeader": {
        "localIdentifier": "city",
        "identifier": "label.restaurantlocation.locationcity",
        "uri": obj_uri(2209),
        "name": "Location City",
        "formOf": {
            "uri": obj_uri(2208),
            "identifier": "attr.restaurantlocation.locationcity",
            "name": "Location City",
        },
    }
}

YEAR_HEADER = {
    "attributeHeader": {
        "localIdentifier": "year",
        "identifier": "date.aag81lMifn6q",
        "uri": obj_uri(2011),
        "name": "Year (Date)",
        "formOf": {
            "uri": obj_uri(2009),
            "identifier": "date.year",
            "name": "Year (Date)",
        },
    }
}

MONTH_HEADER = {
    "attributeHeader": {
        "localIdentifier": "month",
        "identifier": "date.abm81lMifn6q",
        "uri": obj_uri(2073),
        "name": "Short (Jan) (Date)",
        "formOf": {
            "uri": obj_uri(2071),
            "identifier": "date.month",
            "name": "Month (Date)",
        },
    }
}

MEASURES = [
    ("franchiseFeesIdentifier", "$ Franchise Fees", "aaEGaXAEgB7U", 6685),
    ("franchiseFeesAdRoyaltyIdentifier", "$ Franchise Fees (Ad Royalty)", "aabHeqImaK0d", 6694),
    ("franchiseFeesInitialFranchiseFeeIdentifier", "$ Franchise Fees (Initial Franchise Fee)", "aaDHcv6wevkl", 6695),
    ("franchiseFeesIdentifierOngoingRoyalty", "$ Franchise Fees (Ongoing Royalty)", "aaWGcgnsfxIg", 6696),
]

# (state element, state name, city element, city name)
LOCATIONS = [
    (6340109, "Alabama", 6340107, "Montgomery"),
    (6340110, "California", 6340112, "Dublin"),
    (6340110, "California", 6340113, "Irvine"),
    (6340110, "California", 6340114, "San Jose"),
    (6340111, "Florida", 6340115, "Deerfield Beach"),
    (6340111, "Florida", 6340116, "Fort Lauderdale"),
    (6340111, "Florida", 6340117, "Miami"),
    (6340118, "New York", 6340119, "New York"),
    (6340118, "New York", 6340120, "Syracuse"),
    (6340121, "Texas", 6340122, "Dallas"),
    (6340121, "Texas", 6340123, "Houston"),
    (6340121, "Texas", 6340124, "Irving"),
    (6340121, "Texas", 6340125, "San Antonio"),
]

# (year element, year name, month element, month name), 2018-Feb has no data
PERIODS = [
    (1, "2017", 1, "Jan"),
    (1, "2017", 2, "Feb"),
    (2, "2018", 1, "Jan"),
]

ROW_COUNT = len(LOCATIONS)
COLUMN_COUNT = len(PERIODS) * len(MEASURES)


def measure_group_header():
    return {
        "measureGroupHeader": {
            "items": [
                {
                    "measureHeaderItem": {
                        "localIdentifier": local_identifier,
                        "name": name,
                        "format": "$#,##0.00",
                        "identifier": identifier,
                        "uri": obj_uri(object_id),
                    }
                }
                for local_identifier, name, identifier, object_id in MEASURES
            ]
        }
    }


def execution_response():
    return {
        "dimensions": [
            {"headers": [STATE_HEADER, CITY_HEADER]},
            {"headers": [YEAR_HEADER, MONTH_HEADER, measure_group_header()]},
        ],
        "links": {"executionResult": f"{PROJECT}/executionResults/2651138797087227392"},
    }


def cell_value(row, column):
    return str(1000 * (row + 1) + column)


def execution_result(row_offset=0):
    row_header_items = [
        [
            {"attributeHeaderItem": {"uri": element_uri(2210, state), "name": state_name}}
            for state, state_name, _, _ in LOCATIONS
        ],
        [
            {"attributeHeaderItem": {"uri": element_uri(2208, city), "name": city_name}}
            for _, _, city, city_name in LOCATIONS
        ],
    ]

    years, months, measures = [], [], []
    for year, year_name, month, month_name in PERIODS:
        for order, (_, name, _, _) in enumerate(MEASURES):
            years.append(
                {"attributeHeaderItem": {"uri": element_uri(2009, year), "name": year_name}}
            )
            months.append(
                {"attributeHeaderItem": {"uri": element_uri(2071, month), "name": month_name}}
            )
            measures.append({"measureHeaderItem": {"name": name, "order": order}})

    return {
        "data": [
            [cell_value(row, column) for column in range(COLUMN_COUNT)]
            for row in range(ROW_COUNT)
        ],
        "headerItems": [row_header_items, [years, months, measures]],
        "paging": {
            "count": [ROW_COUNT, COLUMN_COUNT],
            "offset": [row_offset, 0],
            "total": [row_offset + ROW_COUNT, COLUMN_COUNT],
        },
    }


def afm():
    return {
        "attributes": [
            {"localIdentifier": "state", "displayForm": {"uri": obj_uri(2211)}},
            {"localIdentifier": "city", "displayForm": {"uri": obj_uri(2209)}},
            {"localIdentifier": "year", "displayForm": {"uri": obj_uri(2011)}},
            {"localIdentifier": "month", "displayForm": {"uri": obj_uri(2073)}},
        ],
        "measures": [
            {
                "localIdentifier": local_identifier,
                "definition": {"measure": {"item": {"uri": obj_uri(object_id)}}},
                "alias": name,
            }
            for local_identifier, name, _, object_id in MEASURES
        ],
    }


def result_spec(sorts=None):
    return {
        "dimensions": [
            {"itemIdentifiers": ["state", "city"]},
            {"itemIdentifiers": ["year", "month", "measureGroup"]},
        ],
        "sorts": sorts or [],
    }


def create_execution(sorts=None, row_offset=0):
    """Validated execution of the fixture, sorted by `sorts` (wire form).

    `row_offset` places the rows on a later result page.
    """
    return Execution.model_validate(
        {
            "executionRequest": {"afm": afm(), "resultSpec": result_spec(sorts)},
            "executionResponse": execution_response(),
            "executionResult": execution_result(row_offset),
        }
    )


SORT_BY_FIRST_MEASURE = {
    "measureSortItem": {
        "direction": "desc",
        "locators": [
            {"attributeLocatorItem": {"attributeIdentifier": "year", "element": element_uri(2009, 1)}},
            {"attributeLocatorItem": {"attributeIdentifier": "month", "element": element_uri(2071, 1)}},
            {"measureLocatorItem": {"measureIdentifier": "franchiseFeesIdentifier"}},
        ],
    }
}

SORT_BY_STATE = {"attributeSortItem": {"attributeIdentifier": "state", "direction": "asc"}}
