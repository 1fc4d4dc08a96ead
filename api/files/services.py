"""
Services for locating and comparing sample files
"""

import os
from pathlib import Path
from typing import Any, List

from api.files.models import (
    ExpectedLocation,
    FieldMismatch,
    FileComparison,
    FileRecord,
    FileRecordsPublic,
    FileRecordUpdate,
    FileType,
)
from api.reconcile.models import ReconcilePolicy, ReconcilerConfig
from core.logger import logger
from core.mosaic import MosaicClient

FILE_SCHEME = "file://"

VCF_SUFFIXES = {
    FileType.VCF: ".vcf.gz",
    FileType.TBI: ".vcf.gz.tbi",
}


def _parse_file_uri(uri: str) -> str:
    """Strip the file:// scheme and return the local path"""
    if not uri or not uri.startswith(FILE_SCHEME):
        raise ValueError(f"Invalid file URI: {uri!r}. Must start with {FILE_SCHEME}")

    path = uri[len(FILE_SCHEME):]
    if not path:
        raise ValueError("Invalid file URI. Path is required")
    return path


def _to_file_uri(path: str) -> str:
    return f"{FILE_SCHEME}{path}"


def is_accessible(uri: str | None) -> bool:
    """Existence check on the path behind a file:// URI"""
    if not uri:
        return False
    try:
        path = _parse_file_uri(uri)
    except ValueError:
        return False
    return os.access(path, os.F_OK)


def _file_size(uri: str) -> int | None:
    try:
        return os.stat(_parse_file_uri(uri)).st_size
    except (OSError, ValueError):
        return None


def find_single_file(directory: str, suffix: str) -> str | None:
    """
    Return the one filename in directory ending with suffix.

    None when no file, or more than one, matches. OSError from listing
    the directory propagates.
    """
    matches = sorted(
        entry.name
        for entry in Path(directory).iterdir()
        if entry.name.endswith(suffix) and entry.is_file()
    )
    if len(matches) > 1:
        logger.warning(
            f"Found {len(matches)} files ending in {suffix} in {directory}: {matches}"
        )
        return None
    if not matches:
        logger.warning(f"No file ending in {suffix} in {directory}")
        return None
    return matches[0]


def resolve_expected_location(
    record: FileRecord, config: ReconcilerConfig
) -> ExpectedLocation | None:
    """
    Work out where a file record should point.

    CRAM and CRAI files live in the polished BAM directory under their
    recorded name. VCF and TBI files are the single .vcf.gz (or
    .vcf.gz.tbi) in the completed VCF directory, which is rescanned on
    every call.

    Returns None when no expected location can be determined.
    """
    file_type = record.file_type

    if file_type in (FileType.CRAM, FileType.CRAI):
        if not record.name:
            logger.warning(f"File {record.id} has no name, cannot locate it")
            return None
        directory = config.data_dir
        filename = record.name
    elif file_type in (FileType.VCF, FileType.TBI):
        directory = config.vcf_dir
        try:
            filename = find_single_file(directory, VCF_SUFFIXES[file_type])
        except OSError as e:
            logger.error(f"Failed to list {directory}: {e}")
            return None
        if filename is None:
            return None
    else:
        return None

    uri = _to_file_uri(f"{directory}/{filename}")
    return ExpectedLocation(uri=uri, filename=filename, size=_file_size(uri))


def _recorded_size(record: FileRecord) -> int | None:
    try:
        return int(record.size)
    except (TypeError, ValueError):
        return None


def compare_file(
    record: FileRecord,
    expected: ExpectedLocation | None,
    policy: ReconcilePolicy = ReconcilePolicy.METADATA,
) -> FileComparison:
    """
    Compare a file record against the filesystem.

    Under ACCESS only the uri is checked. Under METADATA the recorded size
    is also checked against the file at uri, and name and nickname against
    the expected filename when one is known.
    """
    comparison = FileComparison()
    expected_uri = expected.uri if expected else None

    if not is_accessible(record.uri):
        comparison.uri = FieldMismatch(actual=record.uri, expected=expected_uri)

    if policy == ReconcilePolicy.ACCESS:
        return comparison

    if comparison.uri is None:
        actual_size = _file_size(record.uri)
        if actual_size != _recorded_size(record):
            comparison.size = FieldMismatch(actual=record.size, expected=actual_size)

    if expected is not None:
        if record.name != expected.filename:
            comparison.name = FieldMismatch(actual=record.name, expected=expected.filename)
        if record.nickname != expected.filename:
            comparison.nickname = FieldMismatch(
                actual=record.nickname, expected=expected.filename
            )

    return comparison


def build_update(
    record: FileRecord,
    expected: ExpectedLocation,
    policy: ReconcilePolicy = ReconcilePolicy.METADATA,
) -> FileRecordUpdate:
    """
    Build the corrective update pointing record at expected.

    Under METADATA the size, name and nickname are carried when they
    differ from the expected file; under ACCESS only the uri is sent.
    """
    update = FileRecordUpdate(uri=expected.uri)

    if policy == ReconcilePolicy.ACCESS:
        return update

    if expected.size is not None and expected.size != _recorded_size(record):
        update.size = str(expected.size)
    if record.name != expected.filename:
        update.name = expected.filename
    if record.nickname != expected.filename:
        update.nickname = expected.filename

    return update


def get_sample_files(
    client: MosaicClient, project_id: str, sample_id: int
) -> List[Any]:
    """
    List the raw file records of one sample.

    Only the envelope is validated here; FileRecord.model_validate is left
    to the caller, one record at a time.
    """
    body = client.get(f"/projects/{project_id}/samples/{sample_id}/files")
    return FileRecordsPublic.model_validate(body).data


def update_file(
    client: MosaicClient,
    project_id: str,
    sample_id: int,
    file_id: int,
    update: FileRecordUpdate,
) -> Any:
    """
    PUT a corrective update for one file record.

    Returns the response body, which is only logged.
    """
    return client.put(
        f"/projects/{project_id}/samples/{sample_id}/files/{file_id}",
        update.model_dump(exclude_none=True),
    )
