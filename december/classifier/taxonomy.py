"""
Requirement Taxonomy
====================

Static tables the classifier consults. Nothing in here is computed at
request time; changing behavior means changing a table.

Priority tiers:

    CRITICAL       functionality, UI requirements, integration points,
                   data, security, privacy           -> block and ask
    IMPORTANT      styling, performance, accessibility,
                   validation, error handling        -> assume and state
    SUPPLEMENTARY  advanced features, extensibility,
                   logging/analytics                 -> default silently

Keyword matching is case-insensitive and word-bounded, tolerates a plural
"s"/"es" suffix, and lets spaces inside a phrase also match hyphens
("real time" matches "real-time").
"""

import re
from functools import lru_cache
from dataclasses import dataclass

from december.classifier.models import Priority, RequirementCategory

C = RequirementCategory


CATEGORY_PRIORITY: dict[RequirementCategory, Priority] = {
    C.FUNCTIONALITY: Priority.CRITICAL,
    C.UI_REQUIREMENTS: Priority.CRITICAL,
    C.INTEGRATION_POINTS: Priority.CRITICAL,
    C.DATA: Priority.CRITICAL,
    C.SECURITY: Priority.CRITICAL,
    C.PRIVACY: Priority.CRITICAL,
    C.STYLING: Priority.IMPORTANT,
    C.PERFORMANCE: Priority.IMPORTANT,
    C.ACCESSIBILITY: Priority.IMPORTANT,
    C.VALIDATION: Priority.IMPORTANT,
    C.ERROR_HANDLING: Priority.IMPORTANT,
    C.ADVANCED_FEATURES: Priority.SUPPLEMENTARY,
    C.EXTENSIBILITY: Priority.SUPPLEMENTARY,
    C.LOGGING_ANALYTICS: Priority.SUPPLEMENTARY,
}


CATEGORY_KEYWORDS: dict[RequirementCategory, tuple[str, ...]] = {
    C.FUNCTIONALITY: (
        "feature", "functionality", "contact form", "todo list", "todo app",
        "to do list", "shopping cart", "cart", "checkout", "search", "filter",
        "sorting", "crud", "dashboard", "landing page", "blog", "comment",
        "chat", "calculator", "counter", "timer", "settings page",
        "profile page", "pagination", "routing", "router", "route",
        "notification", "notify",
    ),
    C.UI_REQUIREMENTS: (
        "form", "button", "page", "component", "layout", "navbar", "nav bar",
        "navigation bar", "navigation", "menu", "sidebar", "header", "footer",
        "modal", "dialog", "card", "grid", "table", "list", "dropdown", "tab",
        "screen", "hero section", "carousel", "input", "toast", "view",
    ),
    C.INTEGRATION_POINTS: (
        "api", "rest api", "graphql", "endpoint", "webhook", "integration",
        "integrate", "third party", "payment", "billing", "stripe", "paypal",
        "real time", "realtime", "live update", "websocket", "email service",
        "sms",
    ),
    C.DATA: (
        "database", "db", "data model", "schema", "persist", "persistence",
        "store data", "save data", "storage", "local storage", "localstorage",
        "state management", "file upload", "upload", "record", "data",
    ),
    C.SECURITY: (
        "authentication", "authenticate", "auth", "authorization", "login",
        "log in", "login system", "sign in", "sign up", "signup",
        "registration", "password", "permission", "access control",
        "role based access", "user account", "encryption", "encrypt", "csrf",
        "xss", "security",
    ),
    C.PRIVACY: (
        "privacy", "gdpr", "ccpa", "consent", "cookie banner", "cookie consent",
        "personal data", "pii", "data retention", "anonymize",
    ),
    C.STYLING: (
        "style", "styling", "styled", "css", "tailwind", "bootstrap", "theme",
        "dark mode", "light mode", "color", "colour", "font", "typography",
        "animation", "responsive", "mobile friendly", "blue", "red", "green",
        "yellow", "purple", "orange", "pink", "gray", "grey",
    ),
    C.PERFORMANCE: (
        "performance", "performant", "fast", "faster", "speed", "optimize",
        "optimise", "optimization", "lazy load", "lazy loading", "caching",
        "cache", "memoize", "memoization", "debounce", "bundle size",
    ),
    C.ACCESSIBILITY: (
        "accessibility", "accessible", "a11y", "aria", "screen reader",
        "keyboard navigation", "wcag", "contrast", "alt text",
    ),
    C.VALIDATION: (
        "validation", "validate", "validated", "required field", "zod", "yup",
        "sanitize", "sanitise",
    ),
    C.ERROR_HANDLING: (
        "error handling", "error boundary", "error message", "error state",
        "handle error", "fallback", "retry", "retries", "try catch",
    ),
    C.ADVANCED_FEATURES: (
        "drag and drop", "offline", "offline mode", "pwa", "i18n",
        "internationalization", "localization", "export", "undo",
        "keyboard shortcut", "infinite scroll",
    ),
    C.EXTENSIBILITY: (
        "extensible", "extensibility", "plugin", "configurable", "reusable",
        "customizable", "modular",
    ),
    C.LOGGING_ANALYTICS: (
        "logging", "log", "analytics", "tracking", "telemetry", "metrics",
        "monitoring",
    ),
}


@lru_cache(maxsize=None)
def keyword_pattern(phrase: str) -> re.Pattern:
    """Compile a word-bounded, plural-tolerant pattern for a keyword phrase."""
    parts = [re.escape(part) for part in phrase.lower().split()]
    body = r"[\s-]+".join(parts)
    return re.compile(rf"\b{body}(?:s|es)?\b", re.IGNORECASE)


# ==============================================================================
# Ambiguous Critical Terms
# ==============================================================================

@dataclass(frozen=True)
class TermOption:
    """One interpretation of an ambiguous term and the words that pick it."""
    label: str
    keywords: tuple[str, ...]


@dataclass(frozen=True)
class AmbiguousTerm:
    """
    A Critical term with more than one plausible interpretation.

    The term is triggered by any of its triggers and resolved when an
    option keyword also appears in the analysed text, outside any longer
    requirement phrase ("csrf token" does not pick a token method).
    """
    term: str
    category: RequirementCategory
    triggers: tuple[str, ...]
    question: str
    rationale: str
    options: tuple[TermOption, ...]


AMBIGUOUS_TERMS: tuple[AmbiguousTerm, ...] = (
    AmbiguousTerm(
        term="authentication",
        category=C.SECURITY,
        triggers=("authentication", "authenticate", "auth", "login system", "user account"),
        question="Which authentication method should be used?",
        rationale="The authentication method decides the backend endpoints, "
                  "where credentials live and how sessions expire.",
        options=(
            TermOption("Session-based (server-side sessions with HTTP-only cookies)",
                       ("session based", "server side session", "session cookie",
                        "cookie based", "cookie session")),
            TermOption("Token-based (JWT sent in the Authorization header)",
                       ("jwt", "json web token", "bearer token", "access token",
                        "token based", "token auth", "token authentication")),
            TermOption("Third-party OAuth (Google, GitHub)",
                       ("oauth", "sso", "single sign on", "social login", "auth0", "clerk",
                        "google login", "github login", "sign in with google", "sign in with github",
                        "log in with google", "log in with github", "login with google", "login with github")),
        ),
    ),
    AmbiguousTerm(
        term="database",
        category=C.DATA,
        triggers=("database", "db"),
        question="Which database should be used?",
        rationale="The database choice fixes the schema language, the client "
                  "library and how data is migrated.",
        options=(
            TermOption("PostgreSQL", ("postgres", "postgresql")),
            TermOption("SQLite", ("sqlite",)),
            TermOption("MongoDB", ("mongo", "mongodb")),
            TermOption("MySQL", ("mysql", "mariadb")),
            TermOption("Hosted backend (Supabase or Firebase)", ("supabase", "firebase")),
        ),
    ),
    AmbiguousTerm(
        term="payments",
        category=C.INTEGRATION_POINTS,
        triggers=("payment", "billing"),
        question="Which provider should process the payments?",
        rationale="Each payments provider has its own checkout flow, SDK and webhook events.",
        options=(
            TermOption("Stripe", ("stripe",)),
            TermOption("PayPal", ("paypal",)),
            TermOption("Square", ("square",)),
        ),
    ),
    AmbiguousTerm(
        term="real-time",
        category=C.INTEGRATION_POINTS,
        triggers=("real time", "realtime", "live update"),
        question="Which transport should deliver the real-time updates?",
        rationale="The transport changes both the server endpoint and the client subscription code.",
        options=(
            TermOption("WebSockets", ("websocket", "socket.io")),
            TermOption("Server-Sent Events", ("server sent event", "sse", "eventsource")),
            TermOption("Periodic polling", ("polling", "long polling")),
        ),
    ),
    AmbiguousTerm(
        term="notifications",
        category=C.FUNCTIONALITY,
        triggers=("notification", "notify"),
        question="Which kind of notifications should users receive?",
        rationale="In-app, email and push notifications need different services and permissions.",
        options=(
            TermOption("In-app notifications (toasts or a notification center)",
                       ("in app", "toast", "notification center", "notification bell")),
            TermOption("Email notifications",
                       ("email notification", "email alert", "by email", "via email", "over email")),
            TermOption("Browser push notifications", ("push notification", "web push", "browser push")),
        ),
    ),
    AmbiguousTerm(
        term="file upload",
        category=C.DATA,
        triggers=("file upload", "upload"),
        question="Where should the file upload store its files?",
        rationale="Storage location decides the upload endpoint, size limits and how files are served back.",
        options=(
            TermOption("Server local disk", ("local disk", "filesystem", "file system", "server disk")),
            TermOption("Object storage (S3-compatible)",
                       ("s3", "object storage", "cloud storage", "gcs", "blob storage", "cloudinary")),
        ),
    ),
)


# ==============================================================================
# Required Details
# ==============================================================================

@dataclass(frozen=True)
class RequiredDetail:
    """
    A Critical subject that cannot be built without a concrete detail.

    Missing when `subject` matches, is not part of an `exempt` phrase, and
    `detail` does not occur between the subject and the next UI or feature
    item of the same clause. A clarification answer supplies the detail
    when it matches `answer` (or `detail` when `answer` is unset).
    """
    term: str
    category: RequirementCategory
    subject: re.Pattern
    detail: re.Pattern
    question: str
    rationale: str
    options: tuple[str, ...] = ()
    exempt: re.Pattern | None = None
    answer: re.Pattern | None = None


KNOWN_SERVICES = (
    "stripe", "paypal", "github", "google", "slack", "openai", "twilio",
    "sendgrid", "mailchimp", "supabase", "firebase", "shopify", "spotify",
    "twitter", "discord", "notion", "hubspot", "salesforce", "mapbox",
    "auth0", "openweather", "weather api", "youtube", "airtable",
)

REQUIRED_DETAILS: tuple[RequiredDetail, ...] = (
    RequiredDetail(
        term="form fields",
        category=C.UI_REQUIREMENTS,
        subject=re.compile(r"\bforms?\b", re.IGNORECASE),
        exempt=re.compile(
            r"\b(?:login|log[\s-]?in|sign[\s-]?in|sign[\s-]?up|registration|register|"
            r"search|newsletter|subscribe|subscription)[\s-]+forms?\b",
            re.IGNORECASE,
        ),
        detail=re.compile(
            r"\b(?:fields?|inputs?)\b|\bwith\s+[^.?!\n]*?(?:,|\band\b)",
            re.IGNORECASE,
        ),
        question="Which form fields should be included?",
        rationale="The form fields determine the inputs, the validation rules and the submitted payload.",
        options=("Name, email and message", "Name, email, subject and message"),
        answer=re.compile(r"[,&/]|\band\b|\b(?:fields?|inputs?)\b", re.IGNORECASE),
    ),
    RequiredDetail(
        term="integration",
        category=C.INTEGRATION_POINTS,
        subject=re.compile(
            r"\b(?:integrat(?:e|es|ion|ions)|third[\s-]party\s+(?:apis?|services?)|"
            r"external\s+apis?|connect\s+to\s+(?:an?\s+)?apis?)\b",
            re.IGNORECASE,
        ),
        detail=re.compile(
            r"https?://|\b(?:" + "|".join(re.escape(s).replace(r"\ ", r"[\s-]+") for s in KNOWN_SERVICES) + r")\b",
            re.IGNORECASE,
        ),
        question="Which service should the integration connect to?",
        rationale="The integration target decides the API client, credentials and data mapping.",
    ),
)


# Asked when no requirement at all could be identified
FUNCTIONALITY_QUESTION = (
    "functionality",
    "What functionality should be built or changed?",
    "No feature, component or change target could be identified in the request.",
)

# Asked when a message both asks a question and requests a change
MODE_QUESTION = (
    "mode",
    "Do you want an explanation, or should I implement the change (mode)?",
    "The message both asks how something works and asks for a change.",
    ("Explain how it works", "Implement the change"),
)


# ==============================================================================
# Defaults
# ==============================================================================

# Modern web defaults stated as labeled assumptions for Important gaps
WEB_DEFAULTS: dict[RequirementCategory, str] = {
    C.STYLING: "Tailwind CSS utility classes with a responsive, mobile-first layout.",
    C.PERFORMANCE: "Standard React rendering; lists are keyed and heavy views are lazy-loaded.",
    C.ACCESSIBILITY: "Semantic HTML, labeled controls, visible focus states and WCAG AA contrast.",
    C.VALIDATION: "Required fields and formats are checked client-side before submit, with inline messages.",
    C.ERROR_HANDLING: "Failed operations show a toast and are reported with console.error.",
}

# Best-practice defaults for Supplementary gaps; never surfaced
SILENT_DEFAULTS: dict[RequirementCategory, str] = {
    C.ADVANCED_FEATURES: "Advanced features are left out unless requested.",
    C.EXTENSIBILITY: "Components take their content through props and keep no hidden global state.",
    C.LOGGING_ANALYTICS: "No analytics provider; unexpected errors go to console.error.",
}

# Optional mentions after an implementation
ALTERNATIVES: dict[RequirementCategory, str] = {
    C.ADVANCED_FEATURES: "Drag-and-drop, offline support or internationalization can be added later.",
    C.EXTENSIBILITY: "Larger components can be split into smaller reusable pieces.",
    C.LOGGING_ANALYTICS: "An analytics provider can be wired in once one is chosen.",
}


def priority_of(category: RequirementCategory) -> Priority:
    return CATEGORY_PRIORITY[category]


def categories_for(priority: Priority) -> tuple[RequirementCategory, ...]:
    """All categories in a tier, in declaration order."""
    return tuple(c for c in RequirementCategory if CATEGORY_PRIORITY[c] == priority)
