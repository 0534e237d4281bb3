"""
SKY Solutions portal: system-wide constants.

Path tables, option lists and fixed messages live here so routers, forms and
the role gate agree on them.
"""

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

# "/" is matched exactly; the others by prefix (so /verify/<token> is public).
ROOT_PATH: str = "/"
PUBLIC_PREFIXES: tuple = ("/login", "/register", "/verify")

# Operational endpoints that bypass the role gate entirely.
INFRA_PREFIXES: tuple = ("/health", "/docs", "/redoc", "/openapi.json")

LOGIN_PATH: str = "/login"
# Must stay reachable for every role, so it is exempt from the gate too.
LOGOUT_PATH: str = "/logout"

# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------

GENERIC_ERROR_MESSAGE: str = "Something went wrong"
MISSING_FIELDS_MESSAGE: str = "Please fill all required fields"

# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------

SHARE_REQUESTS_PAGE_SIZE: int = 10
RECOMMENDATIONS_LIMIT: int = 10

# ---------------------------------------------------------------------------
# Intake form option lists
# ---------------------------------------------------------------------------

GENDERS: tuple = ("male", "female", "other")
MARITAL_STATUSES: tuple = ("single", "married", "divorced", "widowed")
SERVICE_PACKAGES: tuple = ("standard", "elite", "platinum")

IDEATION_INDUSTRIES: tuple = (
    "Agritech", "Fintech", "Renewable Energy", "Tourism", "Manufacturing",
    "E-commerce", "HealthTech", "Education", "Other",
)
ACTIVE_BUSINESS_INDUSTRIES: tuple = (
    "Agritech", "Fintech", "Renewable Energy", "Tourism", "Manufacturing",
    "Retail", "Services", "Other",
)
INVESTOR_INDUSTRIES: tuple = (
    "Agritech", "Fintech", "Renewable Energy", "HealthTech", "EdTech",
    "Tourism & Hospitality", "Manufacturing", "E-commerce", "Logistics", "Other",
)

MARKETING_CHANNELS: tuple = ("Social Media", "Referrals", "Partnerships", "Advertising", "Events", "Other")
INVESTOR_TYPES: tuple = ("Angel Investor", "Shareholder", "Paternal", "Bank Loan", "Grant", "Other")
SUPPORT_TYPES: tuple = ("Mentorship", "Network", "Business Strategy", "Legal", "Accounting", "Other")

BUSINESS_STAGES: tuple = ("Pre-revenue", "Early Revenue (<6 months)", "Growth Stage (>6 months)", "Mature")
FUNDING_SOURCES: tuple = ("Bootstrapped", "Friends & Family", "Angel", "Grant", "Other")
FUNDING_TYPES: tuple = ("Equity", "Debt", "Partner", "Grant", "Other")

INVESTMENT_STAGES: tuple = ("Pre-seed (Ideation)", "Growth Stage", "All Stages")
INVESTMENT_TYPES: tuple = ("Equity", "Debt", "Convertible Note", "Grant", "Hybrid")
GEOGRAPHIC_FOCUS: tuple = ("Rwanda Only", "East Africa", "Pan-Africa", "Global")
COMMUNICATION_CHANNELS: tuple = ("Email", "Phone", "WhatsApp", "In-person")

# Investor browse filter ("All Categories" means no filter).
ALL_CATEGORIES: str = "All Categories"
BROWSE_CATEGORIES: tuple = (
    ALL_CATEGORIES, "Technology", "Healthcare", "Finance", "Education", "E-commerce",
    "Food & Beverage", "Real Estate", "Manufacturing", "Services", "Other",
)

# ---------------------------------------------------------------------------
# Identity documents (profile page)
# ---------------------------------------------------------------------------

DOCUMENT_TYPES: tuple = (
    ("national_id", "National ID"),
    ("passport", "Passport"),
    ("passport_image", "Passport Image"),
    ("business_license", "Business License"),
    ("tax_certificate", "Tax Certificate"),
)

# Landing page shows this many listings.
FEATURED_LISTINGS: int = 4
