"""
Plain dict views of the package's records.

Connection descriptors and response envelopes end up as keyword fields of
structured log events, so they flatten into dicts of JSON friendly values:
tuples become lists and nested records their own dict form.
"""
from dataclasses import fields
from typing import Any, ClassVar


def plain(value: Any) -> Any:
    if isinstance(value, WorkspaceRecord):
        return value.to_base()
    if isinstance(value, (list, tuple)):
        return [plain(v) for v in value]
    if isinstance(value, dict):
        return {k: plain(v) for k, v in value.items()}
    return value


class WorkspaceRecord():
    """
    Mixed into the package's dataclasses.
    HIDDEN names fields that are left out of the dict form.
    """
    HIDDEN: ClassVar[tuple[str, ...]] = ()

    def to_base(self) -> dict:
        return {f.name: plain(getattr(self, f.name)) for f in fields(self)
                if f.name not in self.HIDDEN}

    def trim(self) -> dict:
        """to_base without unset fields.  False and 0 count as set."""
        return {k: v for k, v in self.to_base().items()
                if v is not None and (isinstance(v, (bool, int, float)) or v)}
