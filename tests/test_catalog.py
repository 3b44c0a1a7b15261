from __future__ import annotations

import pytest

from laag_smithy.smithy.catalog import HttpBinding, ServiceCatalog
from laag_smithy.smithy.model import Model

NS = "example.weather"


@pytest.fixture
def catalog(weather_model: Model) -> ServiceCatalog:
    return ServiceCatalog(weather_model)


def test_services(catalog: ServiceCatalog) -> None:
    services = catalog.services()

    assert [service.shape_id for service in services] == [f"{NS}#Weather"]
    assert catalog.get_service(f"{NS}#Weather").version == "2006-03-01"
    assert catalog.get_service(f"{NS}#GetCity") is None


def test_operations_include_resource_bindings(catalog: ServiceCatalog) -> None:
    operations = catalog.operations(f"{NS}#Weather")

    assert [op.shape_id for op in operations] == [
        f"{NS}#GetCurrentTime",
        f"{NS}#GetCity",
        f"{NS}#ListCities",
        f"{NS}#GetForecast",
    ]
    assert catalog.operations(f"{NS}#Unknown") == []


def test_resources_are_walked_recursively(catalog: ServiceCatalog) -> None:
    assert [r.shape_id for r in catalog.resources(f"{NS}#Weather")] == [
        f"{NS}#City",
        f"{NS}#Forecast",
    ]


def test_resource_cycles_terminate() -> None:
    model = Model(
        version="2.0",
        shapes={
            "a#Svc": {"type": "service", "version": "1", "resources": ["a#R1"]},
            "a#R1": {"type": "resource", "resources": ["a#R2"], "read": "a#Op"},
            "a#R2": {"type": "resource", "resources": ["a#R1"], "operations": ["a#Op"]},
            "a#Op": {"type": "operation"},
        },
    )
    catalog = ServiceCatalog(model)

    assert [r.shape_id for r in catalog.resources("a#Svc")] == ["a#R1", "a#R2"]
    assert [op.shape_id for op in catalog.operations("a#Svc")] == ["a#Op"]


def test_operation_io(catalog: ServiceCatalog) -> None:
    assert catalog.operation_input(f"{NS}#GetCity").shape_id == f"{NS}#GetCityInput"
    assert catalog.operation_output(f"{NS}#GetCity").shape_id == f"{NS}#GetCityOutput"
    assert catalog.operation_input(f"{NS}#GetCurrentTime") is None
    assert [e.shape_id for e in catalog.operation_errors(f"{NS}#GetCity")] == [
        f"{NS}#NoSuchResource"
    ]
    assert catalog.operation_errors(f"{NS}#Nope") == []


def test_http_binding(catalog: ServiceCatalog) -> None:
    binding = catalog.http_binding(f"{NS}#GetCity")

    assert binding == HttpBinding(
        method="GET",
        uri="/cities/{cityId}",
        code=200,
        headers={"locale": "Accept-Language"},
        query_params={"units": "units"},
        labels=["cityId"],
        payload=None,
    )


def test_http_binding_without_input(catalog: ServiceCatalog) -> None:
    binding = catalog.http_binding(f"{NS}#GetCurrentTime")

    assert binding == HttpBinding(method="GET", uri="/current-time")


def test_http_binding_payload_and_missing_trait() -> None:
    model = Model(
        version="2.0",
        shapes={
            "a#Put": {
                "type": "operation",
                "input": {"target": "a#PutInput"},
                "traits": {"http": {"method": "put", "uri": "/things/{id}"}},
            },
            "a#PutInput": {
                "type": "structure",
                "members": {
                    "id": {"target": "a#Id", "traits": {"httpLabel": {}}},
                    "body": {"target": "a#Blob", "traits": {"httpPayload": {}}},
                },
            },
            "a#Plain": {"type": "operation"},
        },
    )
    catalog = ServiceCatalog(model)

    binding = catalog.http_binding("a#Put")
    assert binding.method == "PUT"
    assert binding.labels == ["id"]
    assert binding.payload == "body"
    assert catalog.http_binding("a#Plain") is None
    assert catalog.http_binding("a#Missing") is None


def test_pagination(catalog: ServiceCatalog) -> None:
    pagination = catalog.pagination(f"{NS}#ListCities")

    assert pagination.input_token == "nextToken"
    assert pagination.items == "items"
    assert catalog.pagination(f"{NS}#GetCity") is None


@pytest.mark.parametrize("name", [f"{NS}#GetCity", "GetCity", "getcity", "get_city", "GET-CITY"])
def test_find_operation(catalog: ServiceCatalog, name: str) -> None:
    assert catalog.find_operation(name).shape_id == f"{NS}#GetCity"


def test_find_operation_ignores_non_operations(catalog: ServiceCatalog) -> None:
    assert catalog.find_operation("GetCityInput") is None
    assert catalog.find_operation("DoesNotExist") is None
