"""Conversion CLI commands for the PIO resource mapper.

``convert to-object`` reads resources out of a document and prints them as
JSON objects; ``convert to-tree`` turns edited JSON objects back into tree
fragments, optionally storing them in a document.
"""

import asyncio
import dataclasses
import json as json_lib
import logging
import sys
import time
from pathlib import Path
from typing import Any, Optional

import click
import pydantic

from pio_mapper.config import build_resolver
from pio_mapper.converters import (
    contact_persons_to_trees,
    organizations_to_trees,
    practitioners_to_trees,
)
from pio_mapper.document.reader import (
    load_contact_persons,
    load_document,
    load_organizations,
    load_patient_extensions,
    load_practitioners,
    patient_id as document_patient_id,
    resource_fragments,
    store_fragments,
)
from pio_mapper.document.tree import SubTree
from pio_mapper.logging_audit import log_audit_event
from pio_mapper.models.common import ConversionResult
from pio_mapper.models.resources import ContactPerson, Organization, Practitioner
from pio_mapper.terminology.resolver import TerminologyResolver
from pio_mapper.terminology.urls import PRACTITIONER_ROLE_KEY
from pio_mapper.utils.exceptions import PIOMapperError

logger = logging.getLogger(__name__)

OBJECT_KINDS = ["contact-person", "organization", "practitioner", "patient-extension"]
TREE_KINDS = ["contact-person", "organization", "practitioner"]

_OBJECT_TYPES = {
    "contact-person": ContactPerson,
    "organization": Organization,
    "practitioner": Practitioner,
}


@click.group()
def convert() -> None:
    """Convert resources between document trees and objects."""
    pass


def _to_json(item: Any) -> Any:
    if isinstance(item, SubTree):
        return item.to_dict()
    if dataclasses.is_dataclass(item):
        return dataclasses.asdict(item)
    return item


def _write_output(payload: dict[str, Any], output: Optional[Path]) -> None:
    text = json_lib.dumps(payload, indent=2, ensure_ascii=False)
    if output:
        output.write_text(text + "\n", encoding="utf-8")
        click.echo(f"Output written to: {output}", err=True)
    else:
        click.echo(text)


def _fail(kind: str, direction: str, input_file: Path, start: float, error: Exception) -> None:
    log_audit_event(
        "CONVERSION_FAILED",
        {
            "status": "failure",
            "resource_kind": kind,
            "direction": direction,
            "input_file": str(input_file),
            "duration": time.time() - start,
            "error_message": str(error),
        },
    )
    click.secho(f"Error: {error}", fg="red", err=True)
    sys.exit(1)


def _load_objects(document: SubTree, kind: str, resolver: TerminologyResolver) -> ConversionResult:
    if kind == "contact-person":
        return ConversionResult(items=load_contact_persons(document, resolver))
    if kind == "organization":
        return ConversionResult(items=load_organizations(document, resolver))
    if kind == "practitioner":
        return load_practitioners(document, resolver)
    return load_patient_extensions(document)


@convert.command("to-object")
@click.argument("document_file", type=click.Path(exists=True, path_type=Path))
@click.option("--kind", type=click.Choice(OBJECT_KINDS), required=True, help="Resource kind to read")
@click.option(
    "--output",
    type=click.Path(path_type=Path),
    default=None,
    help="Write JSON to this file instead of stdout",
)
@click.pass_context
def to_object_command(
    ctx: click.Context, document_file: Path, kind: str, output: Optional[Path]
) -> None:
    """Read the resources of one kind out of a document.

    Prints ``{"items": [...], "ignored": [...]}``. Ignored entries are the
    inputs the conversion deliberately dropped, such as roles without a
    practitioner or duplicate patient extensions.

    Examples:

        pio-mapper convert to-object document.json --kind practitioner

        pio-mapper convert to-object document.json --kind organization --output orgs.json
    """
    start = time.time()
    try:
        resolver = build_resolver(ctx.obj["config"])
        document = load_document(document_file)
        result = _load_objects(document, kind, resolver)
    except PIOMapperError as e:
        _fail(kind, "to-object", document_file, start, e)
        return

    _write_output(
        {
            "items": [_to_json(item) for item in result.items],
            "ignored": [_to_json(item) for item in result.ignored],
        },
        output,
    )
    log_audit_event(
        "CONVERSION_COMPLETED",
        {
            "status": "success",
            "resource_kind": kind,
            "direction": "to-object",
            "input_file": str(document_file),
            "item_count": len(result.items),
            "ignored_count": len(result.ignored),
            "duration": time.time() - start,
        },
    )


def _parse_objects(objects_file: Path, kind: str) -> list[Any]:
    """Parse a JSON list of objects of ``kind``.

    Raises:
        click.BadParameter: If the file is not a valid list of such objects
    """
    try:
        raw = objects_file.read_text(encoding="utf-8")
        return pydantic.TypeAdapter(list[_OBJECT_TYPES[kind]]).validate_json(raw)
    except pydantic.ValidationError as e:
        raise click.BadParameter(
            f"{objects_file} is not a list of {kind} objects:\n{e}", param_hint="OBJECTS_FILE"
        ) from e


@convert.command("to-tree")
@click.argument("objects_file", type=click.Path(exists=True, path_type=Path))
@click.option("--kind", type=click.Choice(TREE_KINDS), required=True, help="Resource kind to write")
@click.option(
    "--document",
    "document_file",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Store the fragments in this document and print the whole document",
)
@click.option("--patient-id", default=None, help="Patient uuid (contact persons; default: from document)")
@click.option(
    "--output",
    type=click.Path(path_type=Path),
    default=None,
    help="Write JSON to this file instead of stdout",
)
@click.pass_context
def to_tree_command(
    ctx: click.Context,
    objects_file: Path,
    kind: str,
    document_file: Optional[Path],
    patient_id: Optional[str],
    output: Optional[Path],
) -> None:
    """Convert edited objects into document fragments.

    Without --document the fragments are printed as ``{"subTrees": [...]}``.
    With --document they replace the stored versions and the updated
    document is printed. Existing practitioner roles of the document keep
    their ids.

    Examples:

        pio-mapper convert to-tree orgs.json --kind organization

        pio-mapper convert to-tree persons.json --kind contact-person --document document.json
    """
    start = time.time()
    objects = _parse_objects(objects_file, kind)
    try:
        resolver = build_resolver(ctx.obj["config"])
        document = load_document(document_file) if document_file else None

        if kind == "contact-person":
            patient = patient_id or (document_patient_id(document) if document else None)
            if not patient:
                raise click.UsageError("Contact persons need --patient-id or a --document with a patient")
            fragments = contact_persons_to_trees(objects, resolver, patient)
        elif kind == "organization":
            fragments = organizations_to_trees(objects, resolver)
        else:
            existing_roles = resource_fragments(document, PRACTITIONER_ROLE_KEY) if document else []
            trees = asyncio.run(practitioners_to_trees(objects, resolver, existing_roles))
            fragments = trees.practitioners + trees.roles
    except PIOMapperError as e:
        _fail(kind, "to-tree", objects_file, start, e)
        return

    if document is not None:
        store_fragments(document, fragments)
        payload = document.to_dict()
    else:
        payload = {"subTrees": [fragment.to_dict() for fragment in fragments]}
    _write_output(payload, output)

    log_audit_event(
        "CONVERSION_COMPLETED",
        {
            "status": "success",
            "resource_kind": kind,
            "direction": "to-tree",
            "input_file": str(objects_file),
            "item_count": len(objects),
            "duration": time.time() - start,
        },
    )
