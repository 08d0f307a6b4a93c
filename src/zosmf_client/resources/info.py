"""z/OSMF server information (``/zosmf/info``)."""

from pydantic import Field

from ..restapi.client import ZOsmfSession
from ..restapi.endpoint import Endpoint
from ..restapi.types import ZOsmfModel, model_parser


class Plugin(ZOsmfModel):
    version: str = Field(alias="pluginVersion")
    status: str | None = Field(default=None, alias="pluginStatus")
    default_name: str = Field(alias="pluginDefaultName")


class Info(ZOsmfModel):
    """Versions and installed plug-ins of the z/OSMF server."""

    zosmf_saf_realm: str
    zosmf_port: str
    plugins: list[Plugin]
    api_version: str
    zos_version: str
    zosmf_version: str
    zosmf_hostname: str


class GetInfo(Endpoint[Info]):
    route = "/zosmf/info"


def info(session: ZOsmfSession) -> GetInfo:
    return GetInfo(session, model_parser(Info))
