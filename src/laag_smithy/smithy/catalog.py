"""Service and operation catalog built from Smithy models."""

from __future__ import annotations

from dataclasses import dataclass, field

from laag_smithy.smithy.model import Model
from laag_smithy.smithy.shape_id import get_name
from laag_smithy.smithy.shapes import (
    OperationShape,
    ResourceShape,
    ServiceShape,
    ShapeType,
    StructureShape,
)
from laag_smithy.smithy.traits import HttpTrait, PaginatedTrait, SmithyTrait, get_trait, has_trait


@dataclass
class HttpBinding:
    method: str
    uri: str
    code: int | None = None
    headers: dict[str, str] = field(default_factory=dict)
    query_params: dict[str, str] = field(default_factory=dict)
    labels: list[str] = field(default_factory=list)
    payload: str | None = None


class ServiceCatalog:
    def __init__(self, model: Model) -> None:
        self._model = model

    def services(self) -> list[ServiceShape]:
        return [
            shape
            for shape in self._model.shapes_by_type(ShapeType.SERVICE)
            if isinstance(shape, ServiceShape)
        ]

    def get_service(self, service_id: str) -> ServiceShape | None:
        shape = self._model.get_shape(service_id)
        return shape if isinstance(shape, ServiceShape) else None

    def operations(self, service_id: str) -> list[OperationShape]:
        """Operations of a service, including those bound through its resources."""
        service = self.get_service(service_id)
        if service is None:
            return []

        operation_ids: dict[str, None] = {}
        for operation_id in service.operations:
            operation_ids.setdefault(operation_id, None)
        for resource in self._walk_resources(service.resources):
            for operation_id in _resource_operations(resource):
                operation_ids.setdefault(operation_id, None)

        operations = []
        for operation_id in operation_ids:
            shape = self.get_operation(operation_id)
            if shape is not None:
                operations.append(shape)
        return operations

    def resources(self, service_id: str) -> list[ResourceShape]:
        """Resources of a service, nested resources included."""
        service = self.get_service(service_id)
        if service is None:
            return []
        return self._walk_resources(service.resources)

    def _walk_resources(self, resource_ids: list[str]) -> list[ResourceShape]:
        found: list[ResourceShape] = []
        seen: set[str] = set()
        pending = list(resource_ids)
        while pending:
            resource_id = pending.pop(0)
            if resource_id in seen:
                continue
            seen.add(resource_id)
            shape = self._model.get_shape(resource_id)
            if not isinstance(shape, ResourceShape):
                continue
            found.append(shape)
            pending.extend(shape.resources)
        return found

    def get_operation(self, operation_id: str) -> OperationShape | None:
        shape = self._model.get_shape(operation_id)
        return shape if isinstance(shape, OperationShape) else None

    def find_operation(self, name: str) -> OperationShape | None:
        # Try exact match first
        operation = self.get_operation(name)
        if operation is not None:
            return operation

        target = name.lower().replace("-", "").replace("_", "")
        for shape_id in self._model.shape_ids():
            candidate = get_name(shape_id).lower().replace("-", "").replace("_", "")
            if candidate == target or shape_id.lower() == name.lower():
                operation = self.get_operation(shape_id)
                if operation is not None:
                    return operation
        return None

    def operation_input(self, operation_id: str) -> StructureShape | None:
        operation = self.get_operation(operation_id)
        if operation is None or operation.input is None:
            return None
        return self._structure(operation.input)

    def operation_output(self, operation_id: str) -> StructureShape | None:
        operation = self.get_operation(operation_id)
        if operation is None or operation.output is None:
            return None
        return self._structure(operation.output)

    def operation_errors(self, operation_id: str) -> list[StructureShape]:
        operation = self.get_operation(operation_id)
        if operation is None:
            return []
        errors = []
        for error_id in operation.errors:
            shape = self._structure(error_id)
            if shape is not None:
                errors.append(shape)
        return errors

    def _structure(self, shape_id: str) -> StructureShape | None:
        shape = self._model.get_shape(shape_id)
        return shape if isinstance(shape, StructureShape) else None

    def http_binding(self, operation_id: str) -> HttpBinding | None:
        """HTTP binding of an operation; ``None`` without a usable http trait."""
        operation = self.get_operation(operation_id)
        if operation is None:
            return None
        http = HttpTrait.from_value(get_trait(operation.traits, SmithyTrait.HTTP.value))
        if http is None:
            return None

        binding = HttpBinding(method=http.method, uri=http.uri, code=http.code)
        input_shape = self.operation_input(operation_id)
        if input_shape is None:
            return binding

        for name, member in input_shape.members.items():
            header = get_trait(member.traits, SmithyTrait.HTTP_HEADER.value)
            if isinstance(header, str):
                binding.headers[name] = header
            query = get_trait(member.traits, SmithyTrait.HTTP_QUERY.value)
            if isinstance(query, str):
                binding.query_params[name] = query
            if has_trait(member.traits, SmithyTrait.HTTP_LABEL.value):
                binding.labels.append(name)
            if has_trait(member.traits, SmithyTrait.HTTP_PAYLOAD.value):
                binding.payload = name
        return binding

    def pagination(self, operation_id: str) -> PaginatedTrait | None:
        operation = self.get_operation(operation_id)
        if operation is None:
            return None
        return PaginatedTrait.from_value(get_trait(operation.traits, SmithyTrait.PAGINATED.value))


def _resource_operations(resource: ResourceShape) -> list[str]:
    return [
        *resource.lifecycle().values(),
        *resource.operations,
        *resource.collection_operations,
    ]
