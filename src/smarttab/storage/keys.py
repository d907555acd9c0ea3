"""Names of the keys in the flat store namespace."""

VISITS = "visits"
DOMAINS = "domains"
SETTINGS = "settings"
BLOCKED_DOMAINS = "blockedDomains"
DISMISSED_REMINDERS = "dismissedReminders"
DAILY_ACTIVE_TIME = "dailyActiveTime"
DAILY_DOMAIN_TIME = "dailyDomainTime"
DOMAIN_LIMITS = "domainLimits"
BLOCKED_ATTEMPTS = "blockedAttempts"
FOCUS_MODE = "focusMode"

ALL_KEYS = (
    VISITS,
    DOMAINS,
    SETTINGS,
    BLOCKED_DOMAINS,
    DISMISSED_REMINDERS,
    DAILY_ACTIVE_TIME,
    DAILY_DOMAIN_TIME,
    DOMAIN_LIMITS,
    BLOCKED_ATTEMPTS,
    FOCUS_MODE,
)
