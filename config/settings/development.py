from .base import *

DEBUG = True

# ======================================================================
# DEVELOPMENT-SPECIFIC SETTINGS
# ======================================================================

# Throttling off locally; the mobile client polls chats and likes often.
REST_FRAMEWORK['DEFAULT_THROTTLE_CLASSES'] = []

# Don't hit the Expo API from a laptop unless asked to.
PUSH_NOTIFICATIONS_ENABLED = os.environ.get('PUSH_NOTIFICATIONS_ENABLED', 'False').lower() in ('1', 'true', 'yes')
