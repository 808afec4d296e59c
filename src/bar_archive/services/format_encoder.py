"""
Format Encoder - serialize canonical records as YAML or JSON bytes.

The encoder is chosen once per export run with get_encoder(). Neither
encoder reorders keys; stable order is the snapshotter's job.

YAML layout:
- block style nesting, 4-space indent
- multi-line strings (instructions, descriptions) as literal `|` blocks
- lists of row mappings (base data) as block mappings, never flow tuples
- no anchors/aliases

JSON layout:
- pretty printed, non-ASCII characters kept literally
"""

import json
from typing import Any, Dict, Optional, Union

import yaml

from bar_archive.models.enums import ExportFormat
from bar_archive.services.exceptions import EncodeError
from bar_archive.utils.constants import JSON_INDENT, YAML_INDENT, YAML_LINE_WIDTH


class _ExportDumper(yaml.SafeDumper):
    """SafeDumper with literal blocks for multi-line text and no aliases."""

    def ignore_aliases(self, data):
        return True

    def increase_indent(self, flow=False, indentless=False):
        # Indent sequence items under their parent key
        return super().increase_indent(flow, False)


def normalize_block_text(text: str) -> str:
    """
    Bring multi-line text into a shape YAML can emit as a literal block.

    PyYAML falls back to a quoted scalar for text with carriage returns,
    tabs or spaces before a line break. Line endings become LF, tabs
    become spaces and trailing whitespace is removed from every line.
    """
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    return "\n".join(line.expandtabs(4).rstrip(" ") for line in lines)


def _represent_str(dumper: yaml.SafeDumper, data: str):
    if "\n" in data or "\r" in data:
        data = normalize_block_text(data)
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


_ExportDumper.add_representer(str, _represent_str)


class YamlEncoder:
    """Structured-text (YAML) encoder."""

    export_format = ExportFormat.YAML

    @property
    def extension(self) -> str:
        return self.export_format.extension

    def encode(self, record: Any, record_id: Optional[str] = None) -> bytes:
        """
        Serialize a canonical record.

        Raises:
            EncodeError: If the record contains values YAML cannot represent
        """
        try:
            return yaml.dump(
                record,
                Dumper=_ExportDumper,
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
                indent=YAML_INDENT,
                width=YAML_LINE_WIDTH,
                encoding="utf-8",
            )
        except yaml.YAMLError as e:
            raise EncodeError(record_id, self.export_format.value, e) from e

    def decode(self, data: bytes) -> Any:
        """Parse encoded bytes back into the neutral record shape."""
        return yaml.safe_load(data)


class JsonEncoder:
    """JSON encoder."""

    export_format = ExportFormat.JSON

    @property
    def extension(self) -> str:
        return self.export_format.extension

    def encode(self, record: Any, record_id: Optional[str] = None) -> bytes:
        """
        Serialize a canonical record.

        Raises:
            EncodeError: If the record contains values JSON cannot represent
        """
        try:
            text = json.dumps(record, indent=JSON_INDENT, ensure_ascii=False, allow_nan=False)
        except (TypeError, ValueError) as e:
            raise EncodeError(record_id, self.export_format.value, e) from e
        return text.encode("utf-8")

    def decode(self, data: bytes) -> Any:
        """Parse encoded bytes back into the neutral record shape."""
        return json.loads(data.decode("utf-8"))


_ENCODERS: Dict[ExportFormat, type] = {
    ExportFormat.YAML: YamlEncoder,
    ExportFormat.JSON: JsonEncoder,
}


def get_encoder(export_format) -> Union[YamlEncoder, JsonEncoder]:
    """
    Get the encoder for a format.

    Args:
        export_format: ExportFormat or its string value ("yaml", "json",
            "structured-text")

    Returns:
        Encoder instance exposing extension, encode() and decode()
    """
    if not isinstance(export_format, ExportFormat):
        export_format = ExportFormat.from_string(str(export_format))
    return _ENCODERS[export_format]()


def encode(record: Any, export_format, record_id: Optional[str] = None) -> bytes:
    """Serialize a canonical record in the given format."""
    return get_encoder(export_format).encode(record, record_id=record_id)


def decode(data: bytes, export_format) -> Any:
    """Parse bytes produced by encode() in the given format."""
    return get_encoder(export_format).decode(data)
