"""Encoders for the in-memory models.

Every model is a tree of plain dataclasses, so encoding is a two step
process: pydantic turns the model into JSON-compatible data, then a format
writer turns that data into bytes. The encoded document always has a single
top-level ``test_results`` entry holding the model.

Formats:
- json: UTF-8 JSON text
- yaml: UTF-8 YAML text (PyYAML safe dumper)
- xml: UTF-8 XML text; lists become repeated ``<item>`` children
- binary: msgpack

json, yaml and binary can be decoded back into an equal model.
"""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET
from functools import cache
from typing import Any

import msgpack
import yaml
from pydantic import TypeAdapter, ValidationError

from covtrace.core.errors import ReportError
from covtrace.coverage.models import ProjectCoverage
from covtrace.results.models import SuiteResult

ROOT_KEY = "test_results"
FORMATS = ("json", "yaml", "xml", "binary")
DECODABLE_FORMATS = ("json", "yaml", "binary")


@cache
def _adapter(model_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(model_type)


def to_plain(model: Any) -> Any:
    """JSON-compatible representation of a model or a list of models."""
    if isinstance(model, (list, tuple)):
        return [to_plain(item) for item in model]
    return _adapter(type(model)).dump_python(model, mode="json")


def _xml_element(tag: str, value: Any) -> ET.Element:
    element = ET.Element(tag)
    if isinstance(value, dict):
        for key, child in value.items():
            element.append(_xml_element(key, child))
    elif isinstance(value, list):
        for child in value:
            element.append(_xml_element("item", child))
    elif value is None:
        element.set("null", "true")
    elif isinstance(value, bool):
        element.text = "true" if value else "false"
    else:
        element.text = str(value)
    return element


def _encode_xml(data: Any, indent: int) -> bytes:
    root = _xml_element("covtrace", {ROOT_KEY: data})
    if indent:
        ET.indent(root, space=" " * indent)
    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


def encode(model: Any, fmt: str, *, indent: int = 2) -> bytes:
    """Encode a model in the given format.

    Raises:
        ReportError: UNSUPPORTED_OUTPUT_FORMAT for unknown formats.
    """
    data = to_plain(model)
    if fmt == "json":
        return json.dumps({ROOT_KEY: data}, indent=indent or None).encode("utf-8")
    if fmt == "yaml":
        return yaml.safe_dump({ROOT_KEY: data}, sort_keys=False).encode("utf-8")
    if fmt == "xml":
        return _encode_xml(data, indent)
    if fmt == "binary":
        return msgpack.packb({ROOT_KEY: data}, use_bin_type=True)
    raise ReportError.unsupported_output(fmt, list(FORMATS))


def _load(raw: bytes, fmt: str) -> Any:
    if fmt == "json":
        return json.loads(raw)
    if fmt == "yaml":
        return yaml.safe_load(raw)
    if fmt == "binary":
        return msgpack.unpackb(raw, raw=False)
    raise ReportError.unsupported_output(fmt, list(DECODABLE_FORMATS))


def decode(raw: bytes, fmt: str, model_type: Any) -> Any:
    """Decode bytes produced by encode() back into a model of model_type.

    Raises:
        ReportError: UNSUPPORTED_OUTPUT_FORMAT for formats that cannot be
            decoded, MALFORMED_INPUT when the content does not hold a model.
    """
    try:
        document = _load(raw, fmt)
    except (json.JSONDecodeError, yaml.YAMLError, msgpack.UnpackException, ValueError) as e:
        raise ReportError.malformed_input(f"<{fmt}>", str(e)) from e

    if not isinstance(document, dict) or ROOT_KEY not in document:
        raise ReportError.malformed_input(f"<{fmt}>", f"missing '{ROOT_KEY}' entry")

    try:
        return _adapter(model_type).validate_python(document[ROOT_KEY])
    except ValidationError as e:
        raise ReportError.malformed_input(f"<{fmt}>", str(e)) from e


def decode_project(raw: bytes, fmt: str) -> ProjectCoverage:
    result: ProjectCoverage = decode(raw, fmt, ProjectCoverage)
    return result


def decode_suites(raw: bytes, fmt: str) -> list[SuiteResult]:
    result: list[SuiteResult] = decode(raw, fmt, list[SuiteResult])
    return result
