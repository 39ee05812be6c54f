"""Canned Disc Golf Metrix responses for tests."""

import httpx

COMPETITION = {
    "Competition": {
        "ID": 2912345,
        "Name": "Tuesday Doubles",
        "Date": "2026-10-13",
        "CourseID": 4711,
        "CourseName": "Riverside",
        "Results": [
            {"UserID": 101, "Name": "Ann Archer", "Sum": 52},
            {"UserID": "102", "Name": "Ben Baker", "Sum": "54"},
            {"UserID": 103, "Name": "Cat Cole", "Sum": 50},
            {"UserID": 104, "Name": "Dan Dean", "Sum": None},
            {"UserID": 105, "Name": "Eve East", "Sum": ""},
            {"UserID": 106, "Name": "Fay Ford", "Sum": 56},
        ],
    }
}

GUEST_COMPETITION = {
    "Competition": {
        "ID": 2912346,
        "Name": "Open Doubles",
        "CourseID": 4711,
        "Results": [
            {"UserID": 101, "Name": "Ann Archer", "Sum": 52},
            {"UserID": None, "Name": "Guest One", "Sum": 55},
            {"UserID": None, "Name": "Guest Two", "Sum": 57},
            {"Name": "Guest Three", "Sum": 53},
            {"UserID": 101, "Name": "Ann Archer", "Sum": 51},
        ],
    }
}

COURSE = {
    "course": {
        "ID": 4711,
        "Name": "Riverside",
        "RatingValue1": "950",
        "RatingResult1": "54",
        "RatingValue2": "1000",
        "RatingResult2": "50",
    }
}

COURSE_WITH_TRACKS = {
    "ID": 4711,
    "Tracks": [
        {"Name": "Main", "RatingValue1": 950, "RatingResult1": 54, "RatingValue2": 1000, "RatingResult2": 50}
    ],
}

BAGTAG = {
    "players": [
        {"Name": "Ann Archer", "Rating": 900},
        {"Name": "Ben Baker", "Rating": "1000"},
        {"Name": "Fay Ford", "Rating": 0},
        {"Name": "Someone Else", "Rating": 870},
        {"Rating": 999},
    ]
}


def metrix_transport(
    competition=COMPETITION, course=COURSE, bagtag=BAGTAG, status_code=200
) -> httpx.MockTransport:
    """Mock transport answering the three Metrix endpoints the client uses."""
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if status_code != 200:
            return httpx.Response(status_code)

        content = request.url.params.get("content")
        payload = {"result": competition, "course": course, "bagtag_list": bagtag}.get(content)
        if payload is None:
            return httpx.Response(404)
        return httpx.Response(200, json=payload)

    transport = httpx.MockTransport(handler)
    transport.requests = requests
    return transport
