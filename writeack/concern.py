"""Write acknowledgment values.

An ``AckSpec`` tells the server how durably a write has to be applied before
the client may treat it as successful:

- ``w``: ``Unset`` (use the server's default), ``Count(n)`` (n members) or
  ``Label(s)`` (``"majority"`` or a tag set name).
- ``timeout_ms``: how long the server may wait for ``w`` members; 0 waits forever.
- ``fsync`` / ``journal``: flush to disk / group commit to the journal first.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .errors import InvalidArgument


@dataclass(frozen=True)
class Unset:
    """No explicit requirement; the server applies its configured default."""


@dataclass(frozen=True)
class Count:
    n: int

    def __post_init__(self) -> None:
        if isinstance(self.n, bool) or not isinstance(self.n, int):
            raise InvalidArgument(f"w must be an int count, got {self.n!r}")
        if self.n < 0:
            raise InvalidArgument(f"w >= 0 required, got {self.n}")


@dataclass(frozen=True)
class Label:
    s: str

    def __post_init__(self) -> None:
        if not isinstance(self.s, str) or not self.s:
            raise InvalidArgument(f"w label must be a non-empty string, got {self.s!r}")


W = Unset | Count | Label

UNSET = Unset()

_VARIANTS = (Unset, Count, Label)


def coerce_w(value: W | int | str | None) -> W:
    """Map a raw ``w`` (None, int or str) to its variant. Variants pass through."""
    if isinstance(value, _VARIANTS):
        return value
    if value is None:
        return UNSET
    # bool is an int subclass but never a member count
    if isinstance(value, bool):
        raise InvalidArgument(f"w must be an int or a str, got {value!r}")
    if isinstance(value, int):
        return Count(value)
    if isinstance(value, str):
        return Label(value)
    raise InvalidArgument(f"w must be an int or a str, got {type(value).__name__}")


def _check_flag(name: str, value: object) -> None:
    if not isinstance(value, bool):
        raise InvalidArgument(f"{name} must be a bool, got {value!r}")


@dataclass(frozen=True)
class AckSpec:
    w: W = UNSET
    timeout_ms: int = 0
    fsync: bool = False
    journal: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.w, _VARIANTS):
            raise InvalidArgument(f"w must be Unset, Count or Label, got {self.w!r}")
        if isinstance(self.timeout_ms, bool) or not isinstance(self.timeout_ms, int):
            raise InvalidArgument(f"wtimeout must be an int, got {self.timeout_ms!r}")
        if self.timeout_ms < 0:
            raise InvalidArgument(f"wtimeout >= 0 required, got {self.timeout_ms}")
        _check_flag("fsync", self.fsync)
        _check_flag("j", self.journal)

        # The server default carries no qualifiers.
        if isinstance(self.w, Unset):
            if self.timeout_ms != 0:
                raise InvalidArgument("wtimeout == 0 required when w is unset")
            if self.fsync:
                raise InvalidArgument("fsync == false required when w is unset")
            if self.journal:
                raise InvalidArgument("j == false required when w is unset")

    # -- construction ------------------------------------------------------

    @classmethod
    def make(
        cls,
        w: W | int | str | None,
        timeout_ms: int = 0,
        fsync: bool = False,
        journal: bool = False,
    ) -> AckSpec:
        return cls(coerce_w(w), timeout_ms, fsync, journal)

    @classmethod
    def from_count(cls, n: int) -> AckSpec:
        return cls(Count(n))

    @classmethod
    def from_label(cls, s: str) -> AckSpec:
        """Wait for a tag set or ``"majority"``.

        Do not pass the string form of a count; ``"2"`` is a tag set name.
        """
        return cls(Label(s))

    @classmethod
    def unset(cls) -> AckSpec:
        return SERVER_DEFAULT

    @classmethod
    def majority(cls, timeout_ms: int = 0, fsync: bool = False, journal: bool = False) -> AckSpec:
        return cls(Label("majority"), timeout_ms, fsync, journal)

    # -- derivations -------------------------------------------------------

    def _promoted_w(self) -> W:
        # A timeout or durability flag needs a concrete w to apply to.
        if isinstance(self.w, Unset):
            return Count(1)
        return self.w

    def with_count(self, n: int) -> AckSpec:
        return replace(self, w=Count(n))

    def with_label(self, s: str) -> AckSpec:
        return replace(self, w=Label(s))

    def with_timeout(self, timeout_ms: int) -> AckSpec:
        """Return a copy waiting at most ``timeout_ms``; ``Unset`` becomes ``Count(1)``."""
        return replace(self, w=self._promoted_w(), timeout_ms=timeout_ms)

    def with_fsync(self, fsync: bool) -> AckSpec:
        return replace(self, w=self._promoted_w(), fsync=fsync)

    def with_journal(self, journal: bool) -> AckSpec:
        return replace(self, w=self._promoted_w(), journal=journal)

    # -- queries -----------------------------------------------------------

    @property
    def w_value(self) -> int | str | None:
        if isinstance(self.w, Count):
            return self.w.n
        if isinstance(self.w, Label):
            return self.w.s
        return None

    def is_server_default(self) -> bool:
        return isinstance(self.w, Unset)

    def is_acknowledged(self) -> bool:
        """False only for an explicit count of zero.

        The server default reads as acknowledged even though it states no
        requirement of its own.
        """
        if isinstance(self.w, Count):
            return self.w.n > 0
        return True

    def as_wire_document(self) -> dict[str, int | str | bool]:
        """Fields in wire order.

        ``w`` is written for any ``Count`` (including 0) or ``Label`` and left out
        only when unset; the other fields are left out at their defaults.
        """
        doc: dict[str, int | str | bool] = {}
        if isinstance(self.w, Count):
            doc["w"] = self.w.n
        elif isinstance(self.w, Label):
            doc["w"] = self.w.s
        if self.timeout_ms > 0:
            doc["wtimeout"] = self.timeout_ms
        if self.fsync:
            doc["fsync"] = True
        if self.journal:
            doc["j"] = True
        return doc

    def __str__(self) -> str:
        return (
            f"AckSpec{{w={self.w_value!r}, wtimeout={self.timeout_ms}, "
            f"fsync={self.fsync}, j={self.journal}}}"
        )


SERVER_DEFAULT = AckSpec()
