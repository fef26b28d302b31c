from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, StrictBool, StrictInt, StrictStr, ValidationError

from .concern import AckSpec
from .errors import InvalidArgument


class WireAckDocument(BaseModel):
    """The write concern document as it travels to the server."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    w: StrictInt | StrictStr | None = None
    wtimeout: StrictInt | None = None
    fsync: StrictBool | None = None
    j: StrictBool | None = None

    def to_spec(self) -> AckSpec:
        # Absent fields read back as their defaults.
        return AckSpec.make(self.w, self.wtimeout or 0, bool(self.fsync), bool(self.j))

    @staticmethod
    def from_spec(spec: AckSpec) -> "WireAckDocument":
        return WireAckDocument(**spec.as_wire_document())


def parse_wire_document(doc: Mapping[str, Any]) -> AckSpec:
    """Read an ``AckSpec`` back from a document built by ``as_wire_document``."""
    if not isinstance(doc, Mapping):
        raise InvalidArgument(f"write concern document must be a mapping, got {type(doc).__name__}")
    try:
        parsed = WireAckDocument.model_validate(dict(doc))
    except ValidationError as exc:
        raise InvalidArgument(f"malformed write concern document: {exc}") from exc
    return parsed.to_spec()


class AckSpecResponse(BaseModel):
    name: str | None = None
    # Preset the value came from
    base: str | None = None
    document: dict[str, int | str | bool]
    acknowledged: bool
    server_default: bool
    deprecated: bool = False
    replacement: str | None = None

    @staticmethod
    def from_spec(
        spec: AckSpec,
        name: str | None = None,
        replacement: str | None = None,
        base: str | None = None,
    ) -> "AckSpecResponse":
        return AckSpecResponse(
            name=name,
            base=base,
            document=spec.as_wire_document(),
            acknowledged=spec.is_acknowledged(),
            server_default=spec.is_server_default(),
            deprecated=replacement is not None,
            replacement=replacement,
        )


class PresetListResponse(BaseModel):
    presets: list[AckSpecResponse]


class DeriveRequest(BaseModel):
    base: str = "acknowledged"
    w: StrictInt | StrictStr | None = None
    wtimeout: StrictInt | None = None
    fsync: StrictBool | None = None
    j: StrictBool | None = None

    def apply_to(self, spec: AckSpec) -> AckSpec:
        """Apply the requested changes in order: w, wtimeout, fsync, j."""
        if isinstance(self.w, int):
            spec = spec.with_count(self.w)
        elif isinstance(self.w, str):
            spec = spec.with_label(self.w)
        if self.wtimeout is not None:
            spec = spec.with_timeout(self.wtimeout)
        if self.fsync is not None:
            spec = spec.with_fsync(self.fsync)
        if self.j is not None:
            spec = spec.with_journal(self.j)
        return spec
