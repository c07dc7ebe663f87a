"""
Constants shared by the data-access layer and the session provider.
"""

# Identities whose id starts with this prefix never reach the remote backend
DEMO_ID_PREFIX = "demo-"
DEMO_PASSWORD = "demo123"

# Local durable storage keys (one snapshot per collection + demo sessions)
# demo_user is the client's current session; demo_user_<id> holds each demo identity
DEMO_USER_KEY = "demo_user"
DEMO_SESSION_KEY_PREFIX = "demo_user_"
GYMS_KEY = "demo_gyms"
EVENTS_KEY = "demo_events"
MEMBERS_KEY = "demo_members"
GYMNASTS_KEY = "demo_gymnasts"
CHALLENGES_KEY = "demo_challenges"
NOTIFICATIONS_KEY = "demo_notifications"

# Timeouts (seconds)
SESSION_BOOTSTRAP_TIMEOUT = 5.0
PROFILE_QUERY_TIMEOUT = 3.0

# Remote notification listing only returns the newest rows
NOTIFICATION_FETCH_LIMIT = 10
