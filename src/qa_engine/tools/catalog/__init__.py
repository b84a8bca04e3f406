# qa_engine/tools/catalog/__init__.py

from typing import Iterable, List, Union

from qa_engine.schemas.core import SystemFilter
from qa_engine.schemas.tools.test_catalog import CatalogEntry, TestDefinition
from qa_engine.tools.catalog.console_checks import build_console_definitions
from qa_engine.tools.catalog.context import RunContext
from qa_engine.tools.catalog.crud_checks import build_crud_checks
from qa_engine.tools.catalog.endpoint_checks import build_endpoint_checks


def build_catalog() -> List[TestDefinition]:
    """Fresh list of the console checks, in a stable order."""
    definitions = build_console_definitions()
    ensure_unique_ids(definitions)
    return definitions


def ensure_unique_ids(definitions: Iterable[TestDefinition]) -> None:
    seen = set()
    for definition in definitions:
        if definition.id in seen:
            raise ValueError(f"Duplicate test definition id: {definition.id}")
        seen.add(definition.id)


def filter_catalog(
    definitions: Iterable[TestDefinition],
    system: Union[SystemFilter, str] = SystemFilter.ALL,
) -> List[TestDefinition]:
    """Keep definitions of the selected system plus the shared ones.

    Relative order is preserved and the input is not modified.
    """
    system = SystemFilter(system)
    if system == SystemFilter.ALL:
        return list(definitions)
    return [
        d for d in definitions if d.system.value in (system.value, SystemFilter.SHARED.value)
    ]


def describe_catalog(definitions: Iterable[TestDefinition]) -> List[CatalogEntry]:
    return [CatalogEntry.from_definition(d) for d in definitions]


__all__ = [
    "RunContext",
    "build_catalog",
    "build_console_definitions",
    "build_crud_checks",
    "build_endpoint_checks",
    "describe_catalog",
    "ensure_unique_ids",
    "filter_catalog",
]
