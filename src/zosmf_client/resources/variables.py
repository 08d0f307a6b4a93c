"""System variables and symbols (``/zosmf/variables/rest/1.0/systems``)."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import Field

from ..restapi.client import ZOsmfSession
from ..restapi.endpoint import Body, Endpoint, Flag, Option, Path, Query
from ..restapi.types import ZOsmfModel, model_parser, none_parser

VARIABLES_ROUTE = "/zosmf/variables/rest/1.0/systems"


@dataclass(frozen=True)
class SystemId:
    """A system as z/OSMF names it in variable routes."""

    sysplex: str | None = None
    system: str | None = None

    @classmethod
    def local(cls) -> "SystemId":
        return cls()

    @classmethod
    def named(cls, sysplex: str, system: str) -> "SystemId":
        return cls(sysplex, system)

    def __str__(self) -> str:
        if self.sysplex is None or self.system is None:
            return "local"
        return f"{self.sysplex}.{self.system}"


class Variable(ZOsmfModel):
    name: str
    value: str
    description: str | None = None


class Symbol(ZOsmfModel):
    name: str
    value: str


class _VariableList(ZOsmfModel):
    variables: list[Variable] = Field(alias="system-variable-list")


class _SymbolList(ZOsmfModel):
    symbols: list[Symbol] = Field(alias="system-symbol-list")


def _variables(response: httpx.Response) -> list[Variable]:
    return model_parser(_VariableList)(response).variables


def _symbols(response: httpx.Response) -> list[Symbol]:
    return model_parser(_SymbolList)(response).symbols


class _Named:
    """Setters for the ``var-name`` filter shared by variable and symbol lists."""

    def name(self, value: str):
        """Add one name to the filter."""
        return self.replace(names=(*(self.get("names") or ()), value))


class ListVariables(_Named, Endpoint[list[Variable]]):
    route = VARIABLES_ROUTE + "/{system}"

    system = Path()
    names = Query("var-name")


class ListSymbols(_Named, Endpoint[list[Symbol]]):
    route = VARIABLES_ROUTE + "/local"

    source = Query("source")
    names = Query("var-name")


class CreateVariables(Endpoint[None]):
    """Define variables of one system, replacing any with the same name."""

    method = "POST"
    route = VARIABLES_ROUTE + "/{system}"

    system = Path()
    variables = Option()

    def _json(self) -> Any:
        return {
            "system-variable-list": [
                {
                    "name": variable.name,
                    "value": variable.value,
                    "description": variable.description or "",
                }
                for variable in self.get("variables") or ()
            ]
        }


class DeleteVariables(Endpoint[None]):
    method = "DELETE"
    route = VARIABLES_ROUTE + "/{system}"

    system = Path()
    names = Option()

    def _json(self) -> Any:
        return list(self.get("names") or ())


class ImportVariables(Endpoint[None]):
    method = "POST"
    route = VARIABLES_ROUTE + "/{system}/actions/import"

    system = Path()
    path = Body("variables-import-file")


class ExportVariables(Endpoint[None]):
    """Write the variables of one system to a CSV file on the host."""

    method = "POST"
    route = VARIABLES_ROUTE + "/{system}/actions/export"

    system = Path()
    path = Option()
    overwrite = Flag("overwrite", location=None)

    def _json(self) -> Any:
        return {
            "variables-export-file": self.get("path"),
            "overwrite": bool(self.get("overwrite")),
        }


class Variables:
    """Entry point for the system variable operations of one session."""

    def __init__(self, session: ZOsmfSession):
        self._session = session

    def list(self, system: SystemId | None = None) -> ListVariables:
        """List the variables of a system.

        Args:
            system: Target system; the local one when omitted.
        """
        return ListVariables(
            self._session, _variables, system=system or SystemId.local()
        )

    def symbols(self) -> ListSymbols:
        """List the system symbols of the local system."""
        return ListSymbols(self._session, _symbols, source="symbol")

    def create(
        self, sysplex: str, system: str, variables: Iterable[Variable]
    ) -> CreateVariables:
        """Create or update variables of a system.

        Args:
            sysplex: Sysplex name.
            system: System name.
            variables: Variables to define. Existing ones are overwritten.
        """
        return self._build(
            CreateVariables, sysplex, system, variables=tuple(variables)
        )

    def delete(
        self, sysplex: str, system: str, names: Iterable[str]
    ) -> DeleteVariables:
        """Delete variables of a system by name.

        Args:
            sysplex: Sysplex name.
            system: System name.
            names: Names of the variables to delete.
        """
        return self._build(DeleteVariables, sysplex, system, names=tuple(names))

    def import_file(self, sysplex: str, system: str, path: str) -> ImportVariables:
        """Import variables from a CSV file on the z/OS UNIX file system.

        Args:
            sysplex: Sysplex name.
            system: System name.
            path: Absolute path of the CSV file.
        """
        return self._build(ImportVariables, sysplex, system, path=path)

    def export_file(self, sysplex: str, system: str, path: str) -> ExportVariables:
        """Export variables to a CSV file; set ``overwrite`` to replace it.

        Args:
            sysplex: Sysplex name.
            system: System name.
            path: Absolute path of the CSV file to write.
        """
        return self._build(ExportVariables, sysplex, system, path=path)

    def _build(
        self,
        endpoint: Callable[..., Endpoint],
        sysplex: str,
        system: str,
        **values: Any,
    ) -> Any:
        return endpoint(
            self._session,
            none_parser,
            system=SystemId.named(sysplex, system),
            **values,
        )
