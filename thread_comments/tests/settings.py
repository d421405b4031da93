"""
Django settings for running thread_comments tests.

- In-memory SQLite database
- REST framework with session authentication only
- Capabilities read from flags set on user objects
- Local memory email backend so tests can inspect mail.outbox
"""
import sys

# Security settings (test environment)
SECRET_KEY = 'thread-comments-test-secret-key-not-for-production-use'
DEBUG = True
ALLOWED_HOSTS = ['*']

# Database
# Use in-memory SQLite for fast tests
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

# Installed applications
INSTALLED_APPS = [
    # Django core apps
    'django.contrib.admin',
    'django.contrib.auth',
    'django.contrib.contenttypes',
    'django.contrib.sessions',
    'django.contrib.messages',
    'django.contrib.sites',  # Required for notifications

    # Third-party apps
    'rest_framework',
    'django_filters',

    # Our app
    'thread_comments',

    # Test app (provides the Article model)
    'thread_comments.tests',
]

# Site ID for django.contrib.sites
SITE_ID = 1

# Middleware
MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.contrib.sessions.middleware.SessionMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.auth.middleware.AuthenticationMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
]

# URL configuration
ROOT_URLCONF = 'thread_comments.tests.urls'

# Templates
TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.debug',
                'django.template.context_processors.request',
                'django.contrib.auth.context_processors.auth',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

# Password validation (simplified for tests)
AUTH_PASSWORD_VALIDATORS = []

# Internationalization
LANGUAGE_CODE = 'en-us'
TIME_ZONE = 'UTC'
USE_I18N = True
USE_TZ = True

# Static files (admin templates)
STATIC_URL = '/static/'

# Default primary key field type
DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# ============================================================================
# REST Framework Configuration
# ============================================================================

REST_FRAMEWORK = {
    # Session auth only: unauthenticated requests get 403, not 401
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'rest_framework.authentication.SessionAuthentication',
    ],

    # Pagination
    'DEFAULT_PAGINATION_CLASS': 'rest_framework.pagination.PageNumberPagination',
    'PAGE_SIZE': 20,

    # Rendering
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],

    # Testing
    'TEST_REQUEST_DEFAULT_FORMAT': 'json',
}

# ============================================================================
# Thread Comments Configuration
# ============================================================================

THREAD_COMMENTS_CONFIG = {
    # Read can_read / can_edit / is_admin flags set on user objects in tests
    'CAPABILITY_RESOLVER': 'thread_comments.permissions.flag_capabilities',

    'COMMENTABLE_MODELS': ['tests.Article'],

    'SEND_NOTIFICATIONS': True,
    'DEFAULT_FROM_EMAIL': 'comments@example.com',
}

# ============================================================================
# Logging Configuration (minimal for tests)
# ============================================================================

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'stream': sys.stdout,
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARNING',
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'WARNING',
            'propagate': False,
        },
        'thread_comments': {
            'handlers': ['console'],
            'level': 'DEBUG',
            'propagate': False,
        },
    },
}

# ============================================================================
# Email Configuration
# ============================================================================

EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'
DEFAULT_FROM_EMAIL = 'test@example.com'

# ============================================================================
# Testing-specific settings
# ============================================================================

# Password hashers (fast for testing)
PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]


# Build tables straight from the models
class DisableMigrations:
    def __contains__(self, item):
        return True

    def __getitem__(self, item):
        return None


MIGRATION_MODULES = DisableMigrations()
