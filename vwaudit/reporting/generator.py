"""
VW-AUDIT Report Generator

Renders the finding ledger to Markdown or JSON and writes it to a file or
stream supplied by the caller.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, TextIO, Union

from jinja2 import Template

from vwaudit.boundaries import TrustBoundary, list_boundaries
from vwaudit.errors import ReportWriteError
from vwaudit.findings import FindingLedger
from vwaudit.utils.config import get_config
from vwaudit.utils.logger import get_logger

logger = get_logger(__name__)

REPORT_FORMATS = {
    "markdown": ".md",
    "json": ".json",
}

Destination = Union[str, Path, TextIO]


def format_timestamp(moment: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix"""
    moment = moment or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ReportGenerator:
    """
    Generates vulnerability reports from a finding ledger.
    
    Rendering is a pure function of the ledger and the supplied timestamp.
    Writing is the only side effect, and write failures surface as
    ReportWriteError.
    """
    
    def __init__(self, reports_dir: Optional[Path] = None, title: Optional[str] = None):
        self._config = get_config()
        self._reports_dir = Path(reports_dir) if reports_dir else self._config.reports_dir
        self._title = title or self._config.report_title
    
    @property
    def reports_dir(self) -> Path:
        return self._reports_dir
    
    # ========== Rendering ==========
    
    def render(self, ledger: FindingLedger, generated_at: Optional[datetime] = None) -> str:
        """
        Render the ledger as Markdown.
        
        Args:
            ledger: Findings to render, in order
            generated_at: Timestamp for the header (defaults to now)
            
        Returns:
            Markdown document
        """
        return self._markdown_template.render(
            title=self._title,
            generated_at=format_timestamp(generated_at),
            total=len(ledger),
            counts=ledger.severity_counts(),
            findings=list(ledger)
        )
    
    def render_json(self, ledger: FindingLedger, generated_at: Optional[datetime] = None) -> str:
        """Render the ledger as a JSON document"""
        data = self._prepare_data(ledger, generated_at)
        return json.dumps(data, indent=2) + "\n"
    
    def render_boundaries(self, boundaries: Optional[Iterable[TrustBoundary]] = None) -> str:
        """Render the trust boundary catalog as Markdown"""
        return self._boundary_template.render(
            boundaries=list(boundaries) if boundaries is not None else list_boundaries()
        )
    
    def render_as(
        self,
        ledger: FindingLedger,
        fmt: str = "markdown",
        generated_at: Optional[datetime] = None
    ) -> str:
        """Render in one of REPORT_FORMATS"""
        if fmt not in REPORT_FORMATS:
            raise ValueError(f"Unsupported report format: {fmt} (expected one of {', '.join(REPORT_FORMATS)})")
        if fmt == "json":
            return self.render_json(ledger, generated_at)
        return self.render(ledger, generated_at)
    
    def _prepare_data(self, ledger: FindingLedger, generated_at: Optional[datetime]) -> Dict[str, Any]:
        """Prepare report data from the ledger"""
        return {
            "title": self._title,
            "generated_at": format_timestamp(generated_at),
            "summary": {
                "total_findings": len(ledger),
                "severity_counts": ledger.severity_counts()
            },
            "findings": [finding.to_dict() for finding in ledger]
        }
    
    # ========== Output ==========
    
    def write(
        self,
        ledger: FindingLedger,
        destination: Destination,
        fmt: str = "markdown",
        generated_at: Optional[datetime] = None
    ) -> str:
        """
        Render and write a report.
        
        Args:
            ledger: Findings to render
            destination: File path or writable text stream
            fmt: Report format
            generated_at: Timestamp for the header
            
        Returns:
            The rendered content
            
        Raises:
            ReportWriteError: if the destination cannot be written
        """
        content = self.render_as(ledger, fmt, generated_at)
        
        if hasattr(destination, "write"):
            name = getattr(destination, "name", "<stream>")
            try:
                destination.write(content)
            except OSError as e:
                raise ReportWriteError(str(name), e) from e
            logger.info(f"Wrote {fmt} report to {name}")
            return content
        
        report_path = Path(destination)
        try:
            with open(report_path, "w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            raise ReportWriteError(str(report_path), e) from e
        
        logger.info(f"Generated {fmt} report: {report_path}")
        return content
    
    def generate(
        self,
        ledger: FindingLedger,
        fmt: str = "markdown",
        output: Optional[Path] = None
    ) -> Path:
        """
        Write a report into the reports directory (or to ``output``).
        
        Returns:
            Path to generated report
        """
        if fmt not in REPORT_FORMATS:
            raise ValueError(f"Unsupported report format: {fmt}")
        
        if output is None:
            try:
                self._reports_dir.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise ReportWriteError(str(self._reports_dir), e) from e
            output = self._reports_dir / f"VULNERABILITY_REPORT{REPORT_FORMATS[fmt]}"
        
        self.write(ledger, output, fmt)
        return Path(output)
    
    # ========== Templates ==========
    
    @property
    def _markdown_template(self) -> Template:
        """Markdown report template"""
        return Template('''# {{ title }}

**Generated:** {{ generated_at }}

**Summary**

- Total Vulnerabilities: {{ total }}
{% for label, count in counts.items() %}
- {{ label }}: {{ count }}
{% endfor %}

---

{% for finding in findings %}
## {{ loop.index }}. {{ finding.title }} ({{ finding.id }})

**Severity:** {{ finding.severity.value }} (CVSS {{ "%.1f"|format(finding.cvss_score) }})

**Impact:** {{ finding.impact }}

**Description:**
{{ finding.description }}

**Proof of Concept:**
```
{{ finding.proof_of_concept }}
```

**Affected Locations:**
{% for location in finding.affected_locations %}
- {{ location }}
{% endfor %}

**Remediation:**
{% for step in finding.remediation_steps %}
{{ loop.index }}. {{ step }}
{% endfor %}

---

{% else %}
_No findings recorded._
{% endfor %}
''', trim_blocks=True, lstrip_blocks=True, keep_trailing_newline=True)
    
    @property
    def _boundary_template(self) -> Template:
        """Trust boundary appendix template"""
        return Template('''# Trust Boundaries

{% for b in boundaries %}
## Boundary {{ b.stage }}: {{ b.name }}

**Risk:** {{ b.risk.value }}

{{ b.description }}

**Required validation:** {{ b.required_validation }}

{% if b.risk_notes %}
**Risk notes:**
{% for note in b.risk_notes %}
- {{ note }}
{% endfor %}

{% endif %}
{% if b.code_references %}
**Code references:** {{ b.code_references|join(", ") }}

{% endif %}
{% endfor %}
''', trim_blocks=True, lstrip_blocks=True, keep_trailing_newline=True)
