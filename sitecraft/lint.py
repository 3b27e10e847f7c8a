"""Content quality checks for authors.

These checks sit on top of schema validation. They report issues an
author should fix (malformed or duplicate slugs) and softer warnings
(SEO text lengths), and never raise.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass

from .models import SiteContent

SLUG_RE = re.compile(r"[a-z0-9]+(?:-[a-z0-9]+)*")

SEO_TITLE_MIN = 30
SEO_TITLE_MAX = 60
SEO_DESCRIPTION_MIN = 120
SEO_DESCRIPTION_MAX = 160

ERROR = "error"
WARNING = "warning"


@dataclass(frozen=True)
class LintIssue:
    field: str
    message: str
    severity: str


def _length_issues(field: str, label: str, text: str, low: int, high: int) -> list[LintIssue]:
    length = len(text)
    if length < low:
        return [LintIssue(field, f"{label} is short ({length}/{low} characters recommended)", WARNING)]
    if length > high:
        return [LintIssue(field, f"{label} is too long ({length}/{high} characters max)", WARNING)]
    return []


def lint_site_content(content: SiteContent) -> list[LintIssue]:
    """Check a validated aggregate for authoring issues.

    Args:
        content: Aggregate to check.

    Returns:
        Issues found, errors and warnings mixed, in field order.
    """
    issues: list[LintIssue] = []
    for index, page in enumerate(content.pages):
        if not SLUG_RE.fullmatch(page.slug):
            issues.append(
                LintIssue(
                    f"pages[{index}].slug",
                    f"Page {index + 1}: slug may only contain lowercase letters, "
                    "digits and single hyphens",
                    ERROR,
                )
            )

    counts = Counter(page.slug for page in content.pages)
    duplicates = [slug for slug, count in counts.items() if count > 1]
    if duplicates:
        issues.append(
            LintIssue("pages", f"Duplicate slugs found: {', '.join(duplicates)}", ERROR)
        )

    issues.extend(
        _length_issues("seo.title", "SEO title", content.seo.title, SEO_TITLE_MIN, SEO_TITLE_MAX)
    )
    issues.extend(
        _length_issues(
            "seo.description",
            "SEO description",
            content.seo.description,
            SEO_DESCRIPTION_MIN,
            SEO_DESCRIPTION_MAX,
        )
    )
    return issues


def has_errors(issues: list[LintIssue]) -> bool:
    return any(issue.severity == ERROR for issue in issues)
