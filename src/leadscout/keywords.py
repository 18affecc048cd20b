"""
LeadScout keyword dictionary - every trigger phrase list in one place.

Signal detection is plain substring matching, so phrases are stored lowercase.
Keep "vp " with its trailing space: it stops matching inside words like "mvp".
"""

# =============================================================================
# SIGNAL CATEGORIES (shared by signal detection and keyword scoring)
# =============================================================================

SIGNAL_KEYWORDS: dict[str, list[str]] = {
    "video_production": [
        "video",
        "producer",
        "webinar",
        "podcast",
        "training video",
        "explainer",
        "animation",
        "motion graphics",
        "post-production",
        "editing",
        "filmmaker",
        "videographer",
    ],
    "content_marketing": [
        "content",
        "marketing",
        "comms",
        "communications",
        "brand",
        "campaigns",
        "content ops",
        "internal comms",
        "enablement",
        "social media",
        "demand gen",
    ],
    "seniority": [
        "manager",
        "director",
        "head of",
        "vp ",
        "vice president",
        "lead",
        "senior",
        "chief",
        "founder",
        "co-founder",
        "principal",
    ],
    "remote_canada": [
        "remote",
        "canada",
        "canadian",
        "toronto",
        "vancouver",
        "montreal",
        "ottawa",
        "calgary",
    ],
    "recency": [
        "just posted",
        "1 day ago",
        "2 days ago",
        "3 days ago",
        "days ago",
        "hours ago",
        "1 week ago",
        "weeks ago",
        "recently",
        "new role",
        "just started",
    ],
    "accessibility": [
        "accessibility",
        "captions",
        "closed captions",
        "subtitles",
        "wcag",
        "ada compliant",
        "sound-off",
        "readable",
        "inclusive design",
        "alt text",
    ],
}

# =============================================================================
# CRAWL KEYWORDS (offline hunter scoring)
# =============================================================================

VIDEO_KEYWORDS = [
    "webinar",
    "podcast",
    "training",
    "video",
    "ads",
    "advertisement",
    "social",
    "youtube",
    "case study",
    "testimonial",
    "demo",
    "screencast",
    "animation",
    "editing",
    "production",
]

LOCATION_KEYWORDS = [
    "canada",
    "canadian",
    "remote",
    "distributed",
    "on-site",
    "onsite",
    "in-office",
    "hybrid",
    "work from home",
    "wfh",
]

# =============================================================================
# LINK SUB-SIGNALS
# =============================================================================

CONTACT_LINK_TERMS = ["contact"]
CAREERS_LINK_TERMS = ["career", "jobs"]
DEMO_LINK_TERMS = ["demo", "booking", "schedule", "calendar"]
SOCIAL_DOMAINS = ["twitter.com", "facebook.com", "instagram.com", "youtube.com"]

# =============================================================================
# NORMALIZER INDICATORS
# =============================================================================

CANADA_INDICATORS = [
    "canada",
    "canadian",
    ".ca",
    "toronto",
    "vancouver",
    "montreal",
    "calgary",
    "ottawa",
    "winnipeg",
    "provincial",
    "province",
]

US_INDICATORS = [
    "united states",
    "america",
    "usa",
    ".us",
    "new york",
    "los angeles",
    "san francisco",
    "texas",
    "california",
]

REMOTE_INDICATORS = [
    "remote",
    "distributed",
    "work from",
    "wfh",
    "async",
    "global",
    "anywhere",
]

OFFICE_INDICATORS = ["on-site", "onsite", "in-office", "office required", "location required"]
