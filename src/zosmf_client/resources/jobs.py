"""Batch job operations (``/zosmf/restjobs/jobs``).

Jobs are addressed either by name and id or by their job correlator::

    zosmf.jobs().status(NameId("TESTJOB1", "JOB00023")).step_data().build()
    zosmf.jobs().cancel(Correlator("J0000023SY1.....C9A2B3F1.......:")).build()
"""

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, TypeVar

from pydantic import ConfigDict, Field

from ..restapi.client import ZOsmfSession
from ..restapi.endpoint import Endpoint, Flag, Header, Option, Path, Query
from ..restapi.types import (
    ContentResult,
    ItemList,
    OptionalText,
    ZOsmfModel,
    array_parser,
    bytes_parser,
    model_parser,
    none_parser,
    text_parser,
)
from .common import DataType, Searchable

T = TypeVar("T")

JOBS_ROUTE = "/zosmf/restjobs/jobs"

# Version 2.0 waits for the request to complete; 1.0 returns at once
SYNCHRONOUS_VERSION = "2.0"
ASYNCHRONOUS_VERSION = "1.0"


@dataclass(frozen=True)
class NameId:
    name: str
    id: str

    def __str__(self) -> str:
        return f"{self.name}/{self.id}"


@dataclass(frozen=True)
class Correlator:
    value: str

    def __str__(self) -> str:
        return self.value


Identifier = NameId | Correlator


class JobStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INPUT = "INPUT"
    OUTPUT = "OUTPUT"


class JobType(str, Enum):
    JOB = "JOB"
    STARTED_TASK = "STC"
    TSO_USER = "TSU"


class RecordFormat(str, Enum):
    FIXED = "F"
    VARIABLE = "V"


class NotificationEvent(str, Enum):
    ACTIVE = "active"
    COMPLETE = "complete"
    READY = "ready"


class JclMode(str, Enum):
    TEXT = "TEXT"
    BINARY = "BINARY"
    RECORD = "RECORD"


@dataclass(frozen=True)
class Jcl:
    """JCL sent in the request body."""

    data: str | bytes
    mode: JclMode = JclMode.TEXT


@dataclass(frozen=True)
class JclDataset:
    """JCL read by z/OSMF from a data set or member, e.g. ``USER.JCL(IEFBR14)``."""

    name: str


@dataclass(frozen=True)
class JclFile:
    """JCL read by z/OSMF from a z/OS UNIX file."""

    path: str


JobSource = str | Jcl | JclDataset | JclFile


def _kebab(name: str) -> str:
    return name.replace("_", "-")


class JobsModel(ZOsmfModel):
    model_config = ConfigDict(frozen=True, alias_generator=_kebab)


class Step(JobsModel):
    active: bool
    smf_id: OptionalText = Field(default=None, alias="smfid")
    step_number: int
    selected_time: OptionalText = None
    owner: OptionalText = None
    program_name: str
    step_name: str
    path_name: OptionalText = None
    substep_number: int | None = None
    end_time: OptionalText = None
    proc_step_name: str
    completion_code: OptionalText = Field(default=None, alias="completion")
    abend_reason_code: OptionalText = None


class Job(JobsModel):
    id: str = Field(alias="jobid")
    name: str = Field(alias="jobname")
    subsystem: str | None = None
    owner: str
    status: JobStatus | None = None
    job_type: JobType | None = Field(default=None, alias="type")
    job_class: str = Field(alias="class")
    return_code: str | None = Field(default=None, alias="retcode")
    url: str
    files_url: str
    job_correlator: str | None = None
    phase: int
    phase_name: str
    reason_not_running: str | None = None

    @property
    def identifier(self) -> NameId:
        return NameId(self.name, self.id)


class JobExec(Job):
    """Job with the execution data z/OSMF adds for ``exec-data=Y``."""

    exec_system: str | None = None
    exec_member: str | None = None
    exec_submitted: datetime | None = None
    exec_ended: datetime | None = None


class JobStep(Job):
    step_data: list[Step]


class JobExecStep(JobExec):
    step_data: list[Step]


class JobFile(JobsModel):
    """One spool file of a job."""

    job_name: str = Field(alias="jobname")
    record_format: str = Field(alias="recfm")
    byte_count: int
    record_count: int
    job_correlator: str | None = None
    job_class: str = Field(alias="class")
    job_id: str = Field(alias="jobid")
    id: int
    dd_name: str = Field(alias="ddname")
    records_url: str
    record_length: int = Field(alias="lrecl")
    subsystem: str
    step_name: str | None = Field(default=None, alias="stepname")
    proc_step: str | None = Field(default=None, alias="procstep")


class Feedback(JobsModel):
    """Outcome of a hold, release, cancel, class change or purge request."""

    id: str = Field(alias="jobid")
    name: str = Field(alias="jobname")
    original_id: str | None = Field(default=None, alias="original-jobid")
    owner: str
    member: str
    system_name: str = Field(alias="sysname")
    job_correlator: str
    status: str
    internal_code: str | None = None
    message: str | None = None


class ListJobs(Endpoint[T]):
    """List jobs, optionally filtered by owner, prefix, id or correlator.

    The filters combine. ``active_only()`` keeps jobs still executing.
    """

    route = JOBS_ROUTE + "{subsystem}"

    subsystem = Path("/-{}")
    owner = Query("owner")
    prefix = Query("prefix")
    job_id = Query("jobid")
    max_jobs = Query("max-jobs")
    user_correlator = Query("user-correlator")
    active_only = Flag("status", "active")
    include_exec_data = Flag("exec-data", "Y")

    def exec_data(self) -> "ListJobs[ItemList[JobExec]]":
        return self.replace(include_exec_data=True).with_parser(array_parser(JobExec))


_STATUS_MODELS: dict[tuple[bool, bool], type[Job]] = {
    (False, False): Job,
    (True, False): JobExec,
    (False, True): JobStep,
    (True, True): JobExecStep,
}


class JobStatusRequest(Endpoint[T]):
    """Status of one job.

    ``exec_data()`` and ``step_data()`` can be combined; the parsed model
    follows whichever of them are set.
    """

    route = JOBS_ROUTE + "{subsystem}/{identifier}"

    subsystem = Path("/-{}")
    identifier = Path()
    user_correlator = Query("user-correlator")
    include_exec_data = Flag("exec-data", "Y")
    include_step_data = Flag("step-data", "Y")

    def _with_data(self, **flags: bool) -> "JobStatusRequest":
        clone = self.replace(**flags)
        key = (
            bool(clone.get("include_exec_data")),
            bool(clone.get("include_step_data")),
        )
        return clone.with_parser(model_parser(_STATUS_MODELS[key]))

    def exec_data(self) -> "JobStatusRequest":
        return self._with_data(include_exec_data=True)

    def step_data(self) -> "JobStatusRequest":
        return self._with_data(include_step_data=True)


class ListJobFiles(Endpoint[ItemList[JobFile]]):
    """Spool files of one job."""

    route = JOBS_ROUTE + "{subsystem}/{identifier}/files"

    subsystem = Path("/-{}")
    identifier = Path()


class ReadJobFile(Searchable[T]):
    """Records of one spool file, or the JCL of the job."""

    route = JOBS_ROUTE + "{subsystem}/{identifier}/files/{file_id}/records"

    subsystem = Path("/-{}")
    identifier = Path()
    file_id = Path()
    data_type = Query("mode")
    encoding = Query("fileEncoding")
    record_range = Header("X-IBM-Record-Range")

    def text(self) -> "ReadJobFile[ContentResult[str]]":
        return self.replace(data_type=None).with_parser(
            text_parser(with_transaction=False)
        )

    def binary(self) -> "ReadJobFile[ContentResult[bytes]]":
        return self.replace(data_type=DataType.BINARY).with_parser(
            bytes_parser(with_transaction=False)
        )

    def record(self) -> "ReadJobFile[ContentResult[bytes]]":
        return self.replace(data_type=DataType.RECORD).with_parser(
            bytes_parser(with_transaction=False)
        )


class SubmitJob(Endpoint[T]):
    """Submit JCL sent inline, or stored in a data set or a file.

    Inline JCL goes in the request body as text or binary. A data set or
    file source is sent as a JSON reference that z/OSMF reads itself.
    """

    method = "PUT"
    route = JOBS_ROUTE + "{subsystem}"

    subsystem = Path("/-{}")
    source = Option()
    message_class = Header("X-IBM-Intrdr-Class")
    record_format = Header("X-IBM-Intrdr-Recfm")
    record_length = Header("X-IBM-Intrdr-Lrecl")
    user_correlator = Header("X-IBM-User-Correlator")
    notification_url = Header("X-IBM-Notification-URL")
    encoding = Header("X-IBM-Intrdr-File-Encoding")
    symbols = Option()
    notification_events = Option()

    def _source(self) -> JobSource:
        source = self.get("source")
        if isinstance(source, str):
            return Jcl(source)
        return source

    def _headers(self) -> dict[str, str]:
        headers = super()._headers()
        source = self._source()
        if isinstance(source, Jcl):
            mode = JclMode(source.mode)
            headers["X-IBM-Intrdr-Mode"] = mode.value
            if mode is JclMode.TEXT:
                headers["Content-Type"] = "text/plain"
            else:
                headers["Content-Type"] = "application/octet-stream"

        symbols: Mapping[str, str] = self.get("symbols") or {}
        for name, value in symbols.items():
            headers[f"X-IBM-JCL-Symbol-{name}"] = str(value)

        events: Iterable[NotificationEvent] = self.get("notification_events") or ()
        names = sorted({NotificationEvent(event).value for event in events})
        if names:
            headers["X-IBM-Notification-Options"] = json.dumps({"events": names})
        return headers

    def _json(self) -> Any:
        source = self._source()
        if isinstance(source, JclDataset):
            return {"file": f"//'{source.name}'"}
        if isinstance(source, JclFile):
            return {"file": source.path}
        return None

    def _content(self) -> str | bytes | None:
        source = self._source()
        if isinstance(source, Jcl):
            return source.data
        return None


class ModifyJob(Endpoint[T]):
    """Hold, release, cancel or change the class of a job."""

    method = "PUT"
    route = JOBS_ROUTE + "{subsystem}/{identifier}"

    subsystem = Path("/-{}")
    identifier = Path()
    request = Option()
    job_class = Option()
    version = Option()

    def _json(self) -> Any:
        body: dict[str, Any] = {}
        if self.get("request") is not None:
            body["request"] = self.get("request")
        if self.get("job_class") is not None:
            body["class"] = self.get("job_class")
        body["version"] = self.get("version") or SYNCHRONOUS_VERSION
        return body

    def asynchronous(self) -> "ModifyJob[None]":
        """Return as soon as z/OSMF has queued the request."""
        return self.replace(version=ASYNCHRONOUS_VERSION).with_parser(none_parser)


class PurgeJob(Endpoint[T]):
    """Cancel a job and purge its output."""

    method = "DELETE"
    route = JOBS_ROUTE + "{subsystem}/{identifier}"

    subsystem = Path("/-{}")
    identifier = Path()
    version = Header("X-IBM-Job-Modify-Version")

    def asynchronous(self) -> "PurgeJob[None]":
        """Return as soon as z/OSMF has queued the purge."""
        return self.replace(version=ASYNCHRONOUS_VERSION).with_parser(none_parser)


class Jobs:
    """Entry point for the job operations of one session.

    Jobs are identified either by name and id (:class:`NameId`) or by their
    :class:`Correlator`.
    """

    def __init__(self, session: ZOsmfSession):
        self._session = session

    def list(self) -> ListJobs[ItemList[Job]]:
        """List jobs; by default z/OSMF returns the caller's own jobs.

        Returns:
            Builder whose ``owner``, ``prefix`` and ``job_id`` setters widen
            or narrow the listing.
        """
        return ListJobs(self._session, array_parser(Job))

    def status(self, identifier: Identifier) -> JobStatusRequest[Job]:
        """Get the status of one job.

        Args:
            identifier: Name and id, or correlator, of the job.
        """
        return JobStatusRequest(self._session, model_parser(Job), identifier=identifier)

    def list_files(self, identifier: Identifier) -> ListJobFiles:
        """List the spool files of a job.

        Args:
            identifier: Name and id, or correlator, of the job.
        """
        return ListJobFiles(self._session, array_parser(JobFile), identifier=identifier)

    def read_file(
        self, identifier: Identifier, file_id: int | str
    ) -> ReadJobFile[ContentResult[str]]:
        """Read a spool file by id, or the submitted JCL with ``file_id="JCL"``.

        Args:
            identifier: Name and id, or correlator, of the job.
            file_id: Spool file id from :meth:`list_files`, or ``"JCL"``.

        Returns:
            Builder reading text by default; ``binary()`` and ``record()``
            switch to bytes.
        """
        return ReadJobFile(
            self._session,
            text_parser(with_transaction=False),
            identifier=identifier,
            file_id=file_id,
        )

    def submit(self, source: JobSource) -> SubmitJob[Job]:
        """Submit a job.

        Args:
            source: JCL text, :class:`Jcl`, :class:`JclDataset` or
                :class:`JclFile`.

        Returns:
            Builder yielding the submitted :class:`Job`.
        """
        return SubmitJob(self._session, model_parser(Job), source=source)

    def hold(self, identifier: Identifier) -> ModifyJob[Feedback]:
        """Hold a job.

        Args:
            identifier: Name and id, or correlator, of the job.
        """
        return self._modify(identifier, request="hold")

    def release(self, identifier: Identifier) -> ModifyJob[Feedback]:
        """Release a held job.

        Args:
            identifier: Name and id, or correlator, of the job.
        """
        return self._modify(identifier, request="release")

    def cancel(self, identifier: Identifier) -> ModifyJob[Feedback]:
        """Cancel a job, keeping its output.

        Args:
            identifier: Name and id, or correlator, of the job.
        """
        return self._modify(identifier, request="cancel")

    def change_class(
        self, identifier: Identifier, job_class: str
    ) -> ModifyJob[Feedback]:
        """Move a job to another execution class.

        Args:
            identifier: Name and id, or correlator, of the job.
            job_class: New job class.
        """
        return self._modify(identifier, job_class=job_class)

    def cancel_and_purge(self, identifier: Identifier) -> PurgeJob[Feedback]:
        """Cancel a job and purge its output.

        Args:
            identifier: Name and id, or correlator, of the job.
        """
        return PurgeJob(
            self._session,
            model_parser(Feedback),
            identifier=identifier,
            version=SYNCHRONOUS_VERSION,
        )

    def _modify(self, identifier: Identifier, **values: Any) -> ModifyJob[Feedback]:
        return ModifyJob(
            self._session,
            model_parser(Feedback),
            identifier=identifier,
            version=SYNCHRONOUS_VERSION,
            **values,
        )
