from __future__ import annotations

import copy

import pytest

from laag_smithy import config
from laag_smithy.smithy.model import Model
from laag_smithy.smithy.parser import JsonParser

NS = "example.weather"

WEATHER_DOCUMENT: dict[str, object] = {
    "smithy": "2.0",
    "metadata": {"authors": ["weather-team"]},
    "shapes": {
        f"{NS}#Weather": {
            "type": "service",
            "version": "2006-03-01",
            "operations": [{"target": f"{NS}#GetCurrentTime"}],
            "resources": [{"target": f"{NS}#City"}],
            "traits": {"smithy.api#documentation": "Provides weather forecasts."},
        },
        f"{NS}#City": {
            "type": "resource",
            "identifiers": {"cityId": {"target": f"{NS}#CityId"}},
            "read": {"target": f"{NS}#GetCity"},
            "list": {"target": f"{NS}#ListCities"},
            "resources": [{"target": f"{NS}#Forecast"}],
        },
        f"{NS}#Forecast": {
            "type": "resource",
            "identifiers": {"cityId": {"target": f"{NS}#CityId"}},
            "read": {"target": f"{NS}#GetForecast"},
        },
        f"{NS}#CityId": {
            "type": "string",
            "traits": {"smithy.api#pattern": "^[A-Za-z0-9 ]+$"},
        },
        f"{NS}#Text": {"type": "string"},
        f"{NS}#PageSize": {"type": "integer"},
        f"{NS}#Probability": {"type": "float"},
        f"{NS}#Instant": {"type": "timestamp"},
        f"{NS}#GetCity": {
            "type": "operation",
            "input": {"target": f"{NS}#GetCityInput"},
            "output": {"target": f"{NS}#GetCityOutput"},
            "errors": [{"target": f"{NS}#NoSuchResource"}],
            "traits": {
                "smithy.api#readonly": {},
                "smithy.api#http": {"method": "GET", "uri": "/cities/{cityId}", "code": 200},
            },
        },
        f"{NS}#GetCityInput": {
            "type": "structure",
            "members": {
                "cityId": {
                    "target": f"{NS}#CityId",
                    "traits": {"smithy.api#required": {}, "smithy.api#httpLabel": {}},
                },
                "locale": {
                    "target": f"{NS}#Text",
                    "traits": {"smithy.api#httpHeader": "Accept-Language"},
                },
                "units": {
                    "target": f"{NS}#Text",
                    "traits": {"smithy.api#httpQuery": "units"},
                },
            },
        },
        f"{NS}#GetCityOutput": {
            "type": "structure",
            "members": {
                "name": {"target": f"{NS}#Text", "traits": {"smithy.api#required": {}}},
            },
        },
        f"{NS}#NoSuchResource": {
            "type": "structure",
            "members": {"resourceType": {"target": f"{NS}#Text"}},
            "traits": {"smithy.api#error": "client", "smithy.api#httpError": 404},
        },
        f"{NS}#ListCities": {
            "type": "operation",
            "input": {"target": f"{NS}#ListCitiesInput"},
            "output": {"target": f"{NS}#ListCitiesOutput"},
            "traits": {
                "smithy.api#readonly": {},
                "smithy.api#paginated": {
                    "inputToken": "nextToken",
                    "outputToken": "nextToken",
                    "items": "items",
                    "pageSize": "pageSize",
                },
                "smithy.api#http": {"method": "GET", "uri": "/cities"},
            },
        },
        f"{NS}#ListCitiesInput": {
            "type": "structure",
            "members": {
                "nextToken": {
                    "target": f"{NS}#Text",
                    "traits": {"smithy.api#httpQuery": "nextToken"},
                },
                "pageSize": {
                    "target": f"{NS}#PageSize",
                    "traits": {"smithy.api#httpQuery": "pageSize"},
                },
            },
        },
        f"{NS}#ListCitiesOutput": {
            "type": "structure",
            "members": {
                "nextToken": {"target": f"{NS}#Text"},
                "items": {"target": f"{NS}#CitySummaries", "traits": {"smithy.api#required": {}}},
            },
        },
        f"{NS}#CitySummaries": {
            "type": "list",
            "member": {"target": f"{NS}#CitySummary"},
        },
        f"{NS}#CitySummary": {
            "type": "structure",
            "members": {
                "cityId": {"target": f"{NS}#CityId", "traits": {"smithy.api#required": {}}},
                "name": {"target": f"{NS}#Text"},
            },
        },
        f"{NS}#GetForecast": {
            "type": "operation",
            "input": {"target": f"{NS}#GetForecastInput"},
            "output": {"target": f"{NS}#GetForecastOutput"},
            "traits": {
                "smithy.api#readonly": {},
                "smithy.api#http": {"method": "GET", "uri": "/cities/{cityId}/forecast"},
            },
        },
        f"{NS}#GetForecastInput": {
            "type": "structure",
            "members": {
                "cityId": {
                    "target": f"{NS}#CityId",
                    "traits": {"smithy.api#required": {}, "smithy.api#httpLabel": {}},
                },
            },
        },
        f"{NS}#GetForecastOutput": {
            "type": "structure",
            "members": {"chanceOfRain": {"target": f"{NS}#Probability"}},
        },
        f"{NS}#GetCurrentTime": {
            "type": "operation",
            "output": {"target": f"{NS}#GetCurrentTimeOutput"},
            "traits": {
                "smithy.api#readonly": {},
                "smithy.api#http": {"method": "GET", "uri": "/current-time"},
            },
        },
        f"{NS}#GetCurrentTimeOutput": {
            "type": "structure",
            "members": {"time": {"target": f"{NS}#Instant", "traits": {"smithy.api#required": {}}}},
        },
        f"{NS}#Tags": {
            "type": "map",
            "key": {"target": f"{NS}#Text"},
            "value": {"target": f"{NS}#Text"},
        },
    },
}


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "load_dotenv", lambda **_: None)
    for key in config.ENV_KEYS.values():
        monkeypatch.delenv(key, raising=False)
    config._load_settings_cached.cache_clear()
    yield
    config._load_settings_cached.cache_clear()


@pytest.fixture
def weather_document() -> dict[str, object]:
    return copy.deepcopy(WEATHER_DOCUMENT)


@pytest.fixture
def weather_model(weather_document: dict[str, object]) -> Model:
    return JsonParser().parse(weather_document)
