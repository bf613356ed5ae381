"""
Print job record models.

A PrintJobRecord is one logged print event. It flows through the pipeline
exactly once:

    raw (caller) -> policies applied -> costs computed -> persisted

Once the record store has accepted it, the record is a ledger entry and is
never updated again. The store hands back copies, so callers cannot mutate
what was persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, Any, List, Optional


class PolicyTag(Enum):
    """Cost-saving interventions that can be applied to a job."""

    COLOR_TO_BW_AUTO_CONVERT = "COLOR_TO_BW_AUTO_CONVERT"
    """Color pages were reclassified as black/white."""

    FORCE_DUPLEX = "FORCE_DUPLEX"
    """A single-sided job was switched to double-sided."""


def _to_int(value: Any) -> Optional[int]:
    """
    Parse an integer field without truncating or guessing.

    Raises:
        ValueError: For bools, fractional numbers and non-numeric strings
    """
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(f"expected an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"expected an integer, got {value!r}")
        return int(value)
    if isinstance(value, str):
        return int(value.strip())
    raise ValueError(f"expected an integer, got {value!r}")


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp into a naive local datetime.

    Ledger timestamps are naive local time; aware inputs are converted.

    Raises:
        ValueError: If the string is not ISO-8601
    """
    parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def _to_timestamp(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        return parse_timestamp(value)
    raise ValueError(f"timestamp must be an ISO-8601 string, got {value!r}")


def _to_bool(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("1", "true", "yes", "on"):
            return True
        if lowered in ("0", "false", "no", "off"):
            return False
    elif isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise ValueError(f"expected a boolean, got {value!r}")


@dataclass
class PrintJobRecord:
    """
    One print event with page, cost and policy attributes.

    Page counts are integers; the invariant after policies run is
    color_page_count + bw_page_count <= page_count. Cost fields stay None
    until the cost calculator fills them.
    """

    job_id: str
    """Job identifier reported by the print server."""

    printer_id: Optional[int]
    """Printer that produced the job."""

    user_id: Optional[int]
    """User who submitted the job."""

    department_id: Optional[int]
    """Department the user belongs to."""

    page_count: int
    """Total page count (must be >= 1)."""

    color_page_count: int = 0
    """Pages containing color content, as measured by the caller."""

    bw_page_count: int = 0
    """Black/white pages."""

    timestamp: Optional[datetime] = None
    """When the job was printed (filled with now() on submission if missing)."""

    document_name: str = ""
    """Name of the printed document."""

    file_size_kb: Optional[int] = None
    """Spool file size, if the print server reported it."""

    is_duplex: bool = False
    """Whether the job prints double-sided."""

    copies: int = 1
    """Number of copies."""

    paper_size: str = "A4"
    """Paper size name (e.g. 'A4', 'A3', 'PHOTO')."""

    status: str = "COMPLETED"
    """Print server status for the job."""

    cost_bw: Optional[Decimal] = None
    """Black/white cost (after duplex discount)."""

    cost_color: Optional[Decimal] = None
    """Color cost."""

    total_cost: Optional[Decimal] = None
    """cost_bw + cost_color."""

    was_color_converted: bool = False
    """The color-to-bw policy fired."""

    was_duplex_enforced: bool = False
    """The forced duplex policy fired."""

    converted_color_pages: int = 0
    """Exact number of pages the color policy reclassified."""

    policies_applied: List[PolicyTag] = field(default_factory=list)
    """Every policy that mutated the record, in the order applied."""

    id: Optional[int] = None
    """Store-assigned identifier (None until persisted)."""

    @property
    def policy_applied(self) -> str:
        """Name of the last policy applied, or '' (single-field view)."""
        if not self.policies_applied:
            return ""
        return self.policies_applied[-1].value

    @property
    def is_persisted(self) -> bool:
        return self.id is not None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-safe dictionary (amounts as decimal strings)."""
        return {
            "id": self.id,
            "jobId": self.job_id,
            "printerId": self.printer_id,
            "userId": self.user_id,
            "departmentId": self.department_id,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "documentName": self.document_name,
            "fileSizeKb": self.file_size_kb,
            "pageCount": self.page_count,
            "colorPageCount": self.color_page_count,
            "bwPageCount": self.bw_page_count,
            "isDuplex": self.is_duplex,
            "copies": self.copies,
            "paperSize": self.paper_size,
            "status": self.status,
            "costBw": _amount_str(self.cost_bw),
            "costColor": _amount_str(self.cost_color),
            "totalCost": _amount_str(self.total_cost),
            "wasColorConverted": self.was_color_converted,
            "wasDuplexEnforced": self.was_duplex_enforced,
            "convertedColorPages": self.converted_color_pages,
            "policyApplied": self.policy_applied,
            "policiesApplied": [tag.value for tag in self.policies_applied],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PrintJobRecord":
        """
        Create a raw record from a request body.

        Accepts camelCase keys (the wire format) and snake_case keys.
        Only submitted attributes are read: policy flags, costs and the
        store id are produced by the pipeline, so those keys are ignored
        and the fields start at their defaults. Range checks happen in
        modules.validation.

        Raises:
            ValueError: If a field has the wrong type (fractional page
                counts, unrecognized booleans, non-string timestamps)
        """
        def pick(camel: str, snake: str, default: Any = None) -> Any:
            if camel in data:
                return data[camel]
            return data.get(snake, default)

        return cls(
            job_id=str(pick("jobId", "job_id", "") or ""),
            printer_id=_to_int(pick("printerId", "printer_id")),
            user_id=_to_int(pick("userId", "user_id")),
            department_id=_to_int(pick("departmentId", "department_id")),
            page_count=_default(_to_int(pick("pageCount", "page_count")), 0),
            color_page_count=_default(_to_int(pick("colorPageCount", "color_page_count")), 0),
            bw_page_count=_default(_to_int(pick("bwPageCount", "bw_page_count")), 0),
            timestamp=_to_timestamp(pick("timestamp", "timestamp")),
            document_name=str(pick("documentName", "document_name", "") or ""),
            file_size_kb=_to_int(pick("fileSizeKb", "file_size_kb")),
            is_duplex=_to_bool(pick("isDuplex", "is_duplex", False)),
            copies=_default(_to_int(pick("copies", "copies")), 1),
            paper_size=str(pick("paperSize", "paper_size", "A4") or "A4"),
            status=str(pick("status", "status", "COMPLETED") or "COMPLETED"),
        )


def _default(value: Optional[int], default: int) -> int:
    return default if value is None else value


def _amount_str(amount: Optional[Decimal]) -> Optional[str]:
    return None if amount is None else str(amount)
