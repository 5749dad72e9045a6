"""Keyword rules and static task templates for checklist synthesis.

Everything here is data: ordered rule tuples evaluated in sequence by
``interviewprep.checklist.generator``. Order matters; it decides the order of
detected items and which role track wins.
"""

from __future__ import annotations

from typing import Callable, NamedTuple


class ItemTemplate(NamedTuple):
    """A checklist item whose title and detail may hold ``{placeholders}``."""

    id: str
    title: str
    detail: str

    def render(self, **values: str) -> tuple[str, str, str]:
        return (
            self.id.format(**values),
            self.title.format(**values),
            self.detail.format(**values),
        )


class Rule(NamedTuple):
    """A detection rule: fires when ``predicate`` holds for the lower-cased text."""

    id: str
    predicate: Callable[[str], bool]
    template: ItemTemplate


class RoleTrack(NamedTuple):
    key: str
    predicate: Callable[[str], bool]
    tasks: tuple[ItemTemplate, ...]


def contains_any(*needles: str) -> Callable[[str], bool]:
    """Build a case-sensitive substring predicate; callers lower-case the text."""

    def predicate(text: str) -> bool:
        return any(needle in text for needle in needles)

    return predicate


# ---------------------------------------------------------------------------
# Technologies and skills detected in the job description
# ---------------------------------------------------------------------------

TECH_TERMS: tuple[str, ...] = (
    "react", "vue", "angular", "javascript", "typescript", "node", "express",
    "python", "java", "c++", "c#", "golang", "go", "ruby", "rails",
    "aws", "gcp", "azure", "docker", "kubernetes", "sql", "postgresql", "mysql",
    "mongodb", "redis", "graphql", "rest", "api", "html", "css", "sass",
    "tensorflow", "pytorch", "machine learning", "ml", "nlp", "data structures", "algorithms",
    "system design", "distributed", "scalability", "performance",
)

TECH_TEMPLATE = ItemTemplate(
    "tech:{tech}",
    "Review {label}",
    "Refresh core concepts and prepare examples where you used {tech}",
)

TECH_RULES: tuple[Rule, ...] = tuple(
    Rule(f"tech:{term}", contains_any(term), TECH_TEMPLATE) for term in TECH_TERMS
)

# ---------------------------------------------------------------------------
# Responsibilities, each firing at most once
# ---------------------------------------------------------------------------

SYSTEM_DESIGN_RESP = "resp:system-design"
SYSTEM_DESIGN_TECH = "tech:system design"

RESPONSIBILITY_RULES: tuple[Rule, ...] = (
    Rule(
        "resp:leadership",
        contains_any("lead", "manage", "manager", "leadership"),
        ItemTemplate(
            "resp:leadership",
            "Prepare leadership examples",
            "STAR stories about taking ownership, mentoring, and driving outcomes",
        ),
    ),
    Rule(
        "resp:product",
        contains_any("product", "metrics", "roadmap"),
        ItemTemplate(
            "resp:product",
            "Prepare product-sense examples",
            "Discuss metrics, roadmaps, and tradeoffs relevant to the role",
        ),
    ),
    Rule(
        "resp:stakeholder",
        contains_any("customer", "stakeholder"),
        ItemTemplate(
            "resp:stakeholder",
            "Prepare stakeholder communication examples",
            "Examples of working cross-functionally and handling stakeholder needs",
        ),
    ),
    Rule(
        SYSTEM_DESIGN_RESP,
        contains_any("design", "architecture", "system design"),
        ItemTemplate(
            SYSTEM_DESIGN_RESP,
            "Prepare system design examples",
            "Design discussions and decisions around architecture and tradeoffs",
        ),
    ),
)

# ---------------------------------------------------------------------------
# Role tracks, tested against the lower-cased role in priority order
# ---------------------------------------------------------------------------

FOCUS_SYSTEM_DESIGN = ItemTemplate(
    "focus-system-design",
    "Deep-dive system design prep",
    "Sketch architecture, scalability and trade-offs for system components mentioned in job description",
)

ENGINEERING_TRACK = "engineering"

ROLE_TRACKS: tuple[RoleTrack, ...] = (
    RoleTrack(
        ENGINEERING_TRACK,
        contains_any("engineer", "developer", "software"),
        (
            ItemTemplate(
                "tech-review",
                "Review core technical topics and system design",
                "Algorithms, data structures, and system design questions relevant to {seniority}",
            ),
            ItemTemplate(
                "coding-practice",
                "Do timed coding problems (2-3) on your preferred platform",
                "Focus on common interview patterns",
            ),
            ItemTemplate(
                "repo-walkthrough",
                "Prepare to walk through a code sample or project",
                "Pick 1-2 representative commits or PRs",
            ),
        ),
    ),
    RoleTrack(
        "product",
        contains_any("product"),
        (
            ItemTemplate(
                "pm-sense",
                "Prepare product sense examples",
                "Prioritize product tradeoffs, metrics, and roadmap thinking",
            ),
            ItemTemplate(
                "case-study",
                "Practice a product case study",
                "Structure frameworks and clarify assumptions",
            ),
        ),
    ),
    RoleTrack(
        "design",
        contains_any("design", "ux"),
        (
            ItemTemplate(
                "portfolio-review",
                "Prepare portfolio case studies",
                "Include problem, approach, and impact for 2-3 projects",
            ),
            ItemTemplate(
                "design-exercises",
                "Sketch a design exercise",
                "Practice thinking aloud and tradeoffs",
            ),
        ),
    ),
)

GENERIC_TRACK = RoleTrack(
    "generic",
    lambda role: True,
    (
        ItemTemplate(
            "role-overview",
            "Prepare examples that match the role description",
            "Map your experience to the job posting bullets",
        ),
    ),
)

# ---------------------------------------------------------------------------
# Attire, chosen by the lower-cased culture string
# ---------------------------------------------------------------------------

ATTIRE_RULES: tuple[Rule, ...] = (
    Rule(
        "attire:casual",
        contains_any("startup", "casual"),
        ItemTemplate("attire", "Business casual (neat) recommended", "Smart casual: tidy shirt, blazer optional"),
    ),
    Rule(
        "attire:formal",
        contains_any("corporate", "formal"),
        ItemTemplate("attire", "Business formal recommended", "Suit or equivalent professional attire"),
    ),
)

ATTIRE_DEFAULT = ItemTemplate("attire", "Smart casual", "When in doubt, opt for neat + professional")

# ---------------------------------------------------------------------------
# Fixed groups (static text, independent of the job description)
# ---------------------------------------------------------------------------

COMPANY_RESEARCH: tuple[ItemTemplate, ...] = (
    ItemTemplate("company-mission", "Verify company mission and product lines", "Know what {company} builds and why"),
    ItemTemplate("recent-news", "Find recent news or press mentions", "Read 1-3 recent articles or blog posts"),
    ItemTemplate(
        "values-culture",
        "Confirm company values and culture",
        "Look for diversity, remote policies, and interview tone",
    ),
    ItemTemplate(
        "interviewer-research",
        "Research interviewers (LinkedIn) if available",
        "Prepare 1-2 personalized prompts or connections",
    ),
)

QUESTIONS_TO_ASK: tuple[ItemTemplate, ...] = (
    ItemTemplate(
        "questions-list",
        "Prepare 6+ thoughtful questions for the interviewer",
        "Cover role expectations, success metrics, team structure, and next steps",
    ),
)

LOGISTICS: tuple[ItemTemplate, ...] = (
    ItemTemplate("confirm-time", "Confirm interview time and timezone", "Double-check calendar invite and adjust for zones"),
    ItemTemplate("location", "Verify location / meeting link", "Directions, parking, or video link and passcodes"),
    ItemTemplate(
        "tech-check",
        "Test technology setup (camera/mic/screen share)",
        "Run a test call and check internet stability",
    ),
    ItemTemplate("backup-plan", "Plan backup contact method", "Have phone number or alternate email ready"),
)

CONFIDENCE: tuple[ItemTemplate, ...] = (
    ItemTemplate("mock-interview", "Do a mock interview or practice talk", "Record or ask a friend to simulate questions"),
    ItemTemplate("breathing", "Breathing/visualization exercise", "5-10 min breathing and mental walkthrough before interview"),
    ItemTemplate("review-scripts", "Run through 3 STAR stories", "Behavioral examples for teamwork, conflict, impact"),
)

PORTFOLIO: tuple[ItemTemplate, ...] = (
    ItemTemplate("sample-select", "Select 2-4 best work samples", "Tailor to role; ensure links open and run"),
    ItemTemplate("one-pager", "Prepare a one-page summary for each sample", "Problem, approach, technologies, impact"),
)

POST_INTERVIEW: tuple[ItemTemplate, ...] = (
    ItemTemplate("thank-you", "Send a thank-you email within 24 hours", "Personalize to conversation and next steps"),
    ItemTemplate("follow-up", "Record notes and action items", "What went well, what to improve for next time"),
    ItemTemplate("linkedin", "Optional: connect with interviewer on LinkedIn", "Include a short note referencing the interview"),
)

# Canonical group order: (key, title)
GROUPS: tuple[tuple[str, str], ...] = (
    ("role", "Role-specific"),
    ("company", "Company Research"),
    ("questions", "Questions to Ask"),
    ("attire", "Attire Suggestion"),
    ("logistics", "Logistics"),
    ("confidence", "Confidence-Building"),
    ("portfolio", "Portfolio / Work Samples"),
    ("post", "Post-Interview"),
)

GROUP_TITLES: tuple[str, ...] = tuple(title for _, title in GROUPS)
